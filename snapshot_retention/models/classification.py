from enum import Enum


class Classification(Enum):
    KEEP_DAILY = "Within daily retention - keeping {name}"
    KEEP_WEEKLY = "Valid weekly - keeping {name}"
    KEEP_MONTHLY = "Valid monthly - keeping {name}"
    KEEP_YEARLY = "Valid yearly - keeping {name}"
    DELETE = "Deleting {name}"

    @property
    def keep(self) -> bool:
        return self is not Classification.DELETE

    def describe(self, name: str) -> str:
        return self.value.format(name=name)
