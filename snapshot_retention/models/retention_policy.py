from pydantic import NonNegativeInt
from pydantic.dataclasses import dataclass

@dataclass(frozen=True)
class RetentionPolicy:
    daily: NonNegativeInt = 7
    weekly: NonNegativeInt = 4
    monthly: NonNegativeInt = 12
    yearly: NonNegativeInt = 5
