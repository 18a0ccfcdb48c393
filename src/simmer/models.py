from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from .errors import SimmerError


class Verification(Enum):
    UNKNOWN = "unknown"
    VERIFIED = "verified"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class DomNode:
    tag: str
    id: str | None
    classes: tuple[str, ...]
    attributes: Mapping[str, str]
    nth_child: int | None
    handle: Any = field(default=None, compare=False, repr=False)

    def attr(self, key: str) -> str | None:
        raw = self.attributes.get(key)
        if raw is None:
            return None
        value = str(raw).strip()
        return value or None


@dataclass(frozen=True, slots=True)
class Proposal:
    level: int
    fragments: tuple[str, ...]
    specificity: float


@dataclass(slots=True)
class SelectorState:
    """Per-run accumulator of selector fragments.

    ``levels[0]`` holds the fragments for the target element, ``levels[i]`` the
    fragments for its i-th ancestor. The number of levels is fixed when the
    state is created and never changes during a run.
    """

    levels: list[list[str]]
    specificity: float = 0.0
    verified: Verification = Verification.UNKNOWN
    verification_depth: int | None = None

    @classmethod
    def for_hierarchy(cls, size: int) -> SelectorState:
        return cls(levels=[[] for _ in range(size)])

    @property
    def is_verified(self) -> bool:
        return self.verified is Verification.VERIFIED

    def accept(self, proposal: Proposal) -> bool:
        if self.is_verified:
            return False
        if proposal.specificity < 0:
            raise ValueError(f"Specificity contribution must be non-negative, got {proposal.specificity}.")
        if not 0 <= proposal.level < len(self.levels):
            raise IndexError(f"Proposal level {proposal.level} outside of hierarchy (size {len(self.levels)}).")

        bucket = self.levels[proposal.level]
        added = False
        for fragment in proposal.fragments:
            clean = fragment.strip()
            if not clean or clean in bucket:
                continue
            bucket.append(clean)
            added = True
        self.specificity += proposal.specificity
        return added


@dataclass(frozen=True, slots=True)
class StepResult:
    state: SelectorState
    strategy: str
    error: SimmerError | None = None
