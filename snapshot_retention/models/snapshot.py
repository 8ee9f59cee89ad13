from datetime import datetime

from pydantic import Field
from pydantic.dataclasses import dataclass

PROTECTED_LABEL = "delete"
PROTECTED_VALUE = "never"

@dataclass(frozen=True)
class Snapshot:
    name: str
    creation_timestamp: datetime
    labels: dict[str, str] = Field(default_factory=dict)

    @property
    def protected(self) -> bool:
        return self.labels.get(PROTECTED_LABEL) == PROTECTED_VALUE
