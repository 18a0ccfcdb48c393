from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Sequence

from .models import DomNode, Proposal, SelectorState
from .selector_rules import SPECIAL_ATTR_PRIORITY, is_dynamic_class_token, is_stable_attribute_value
from .serializer import escape_css_identifier, escape_css_string

if TYPE_CHECKING:
    from .config import SimmerConfig

ID_SPECIFICITY = 100.0
ATTRIBUTE_SPECIFICITY = 50.0
CLASS_SPECIFICITY = 10.0
TAG_SPECIFICITY = 5.0
NTH_CHILD_SPECIFICITY = 25.0

Hierarchy = Sequence[DomNode]
ProposeFn = Callable[[Hierarchy, SelectorState, "SimmerConfig"], Iterable[Proposal]]


@dataclass(frozen=True, slots=True)
class Strategy:
    name: str
    propose: ProposeFn

    def __call__(self, hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterable[Proposal]:
        return self.propose(hierarchy, state, config)


def inspect_element_id(hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterator[Proposal]:
    for level, node in enumerate(hierarchy):
        id_value = (node.id or "").strip()
        if not id_value:
            continue
        yield Proposal(level, (f"#{escape_css_identifier(id_value)}",), ID_SPECIFICITY)


def inspect_special_attributes(hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterator[Proposal]:
    for level, node in enumerate(hierarchy):
        for attr in SPECIAL_ATTR_PRIORITY:
            value = node.attr(attr)
            if not value or not is_stable_attribute_value(attr, value):
                continue
            yield Proposal(level, (f'[{attr}="{escape_css_string(value)}"]',), ATTRIBUTE_SPECIFICITY)
            break


def inspect_classes(hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterator[Proposal]:
    for level, node in enumerate(hierarchy):
        meaningful = [cls for cls in node.classes if not is_dynamic_class_token(cls)]
        if not meaningful:
            continue
        fragments = tuple(f".{escape_css_identifier(cls)}" for cls in meaningful)
        yield Proposal(level, fragments, CLASS_SPECIFICITY * len(fragments))


def inspect_tags(hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterator[Proposal]:
    for level, node in enumerate(hierarchy):
        if not node.tag:
            continue
        yield Proposal(level, (node.tag.lower(),), TAG_SPECIFICITY)


def inspect_nth_child(hierarchy: Hierarchy, state: SelectorState, config: SimmerConfig) -> Iterator[Proposal]:
    for level, node in enumerate(hierarchy):
        if node.nth_child is None:
            continue
        yield Proposal(level, (f":nth-child({node.nth_child})",), NTH_CHILD_SPECIFICITY)


# Most disambiguating first so the threshold is reached with semantic fragments.
DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("id", inspect_element_id),
    Strategy("special_attributes", inspect_special_attributes),
    Strategy("classes", inspect_classes),
    Strategy("tags", inspect_tags),
    Strategy("nth_child", inspect_nth_child),
)
