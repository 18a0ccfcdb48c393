from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from .errors import ErrorKind, SimmerError
from .models import SelectorState, Verification
from .serializer import convert_selector_state_into_css_selector

if TYPE_CHECKING:
    from .query_engine import QueryEngine

logger = logging.getLogger("simmer.validation")

OnError = Callable[..., None]
Verifier = Callable[[Any, SelectorState, int, "QueryEngine", OnError], bool]


def validate_selector(
    element: Any,
    state: SelectorState,
    max_length: int,
    query: QueryEngine,
    on_error: OnError,
) -> bool:
    """Check whether some prefix of ``state`` selects exactly ``element``.

    Prefixes are tried shortest first. The first unique match marks the state
    verified and records its depth when it is shorter than the full state.
    """
    for depth in range(1, len(state.levels) + 1):
        if depth > 1 and not state.levels[depth - 1]:
            continue

        selector = convert_selector_state_into_css_selector(state, depth)
        if len(selector) > max_length:
            logger.debug("Selector %r exceeds max length %s", selector, max_length)
            break

        if _matches_only(element, selector, query, on_error):
            state.verified = Verification.VERIFIED
            state.verification_depth = depth if depth < len(state.levels) else None
            logger.debug("Verified %r at depth %s", selector, depth)
            return True

    state.verified = Verification.REJECTED
    return False


def _matches_only(element: Any, selector: str, query: QueryEngine, on_error: OnError) -> bool:
    try:
        matches = query.select(selector)
    except Exception as exc:
        on_error(SimmerError.wrap(exc, ErrorKind.QUERY, element=element), element)
        return False
    if len(matches) != 1:
        return False
    return query.is_same(matches[0], element)
