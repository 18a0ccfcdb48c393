from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from .errors import ErrorKind, SimmerError
from .models import DomNode, SelectorState, StepResult

if TYPE_CHECKING:
    from .config import SimmerConfig
    from .query_engine import QueryEngine
    from .strategies import Strategy
    from .validation import OnError, Verifier

logger = logging.getLogger("simmer.parser")


class Parser:
    """Applies strategies one at a time, in priority order, to a selector state."""

    def __init__(self, strategies: Iterable[Strategy]) -> None:
        self._queue: deque[Strategy] = deque(strategies)
        self.applied: list[str] = []

    def finished(self) -> bool:
        return not self._queue

    def next(
        self,
        hierarchy: Sequence[DomNode],
        state: SelectorState,
        config: SimmerConfig,
        verify: Verifier,
        query: QueryEngine,
        on_error: OnError,
    ) -> StepResult:
        if self.finished():
            raise SimmerError("Parser.next() called after every strategy was applied.", ErrorKind.USAGE)

        strategy = self._queue.popleft()
        self.applied.append(strategy.name)
        element: Any = hierarchy[0].handle if hierarchy else None
        before = state.specificity

        try:
            for proposal in strategy(hierarchy, state, config):
                state.accept(proposal)
                if state.specificity >= config.specificity_threshold and not state.is_verified:
                    verify(element, state, config.selector_max_length, query, on_error)
                if state.is_verified:
                    break
        except Exception as exc:
            logger.debug("Strategy %s raised: %s", strategy.name, exc)
            error = SimmerError.wrap(exc, ErrorKind.STRATEGY, element=element, strategy=strategy.name)
            return StepResult(state=state, strategy=strategy.name, error=error)

        logger.debug(
            "Strategy %s: specificity %s -> %s, verified=%s",
            strategy.name,
            before,
            state.specificity,
            state.verified.value,
        )
        return StepResult(state=state, strategy=strategy.name)
