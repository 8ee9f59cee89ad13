from dataclasses import dataclass, field

from .classification import Classification

@dataclass
class PruneReport:
    decisions: list[tuple[str, Classification]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def kept(self) -> list[str]:
        return [name for name, c in self.decisions if c.keep]

    @property
    def ok(self) -> bool:
        return not self.failures
