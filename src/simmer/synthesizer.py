from __future__ import annotations

import logging
from typing import Any, Literal, Mapping, Sequence

from .config import SimmerConfig, configure
from .errors import ErrorKind, ErrorSink
from .hierarchy import stack_hierarchy
from .models import SelectorState, Verification
from .parser import Parser
from .query_engine import QueryEngine, init_query_engine
from .serializer import convert_selector_state_into_css_selector
from .strategies import DEFAULT_STRATEGIES, Strategy
from .validation import validate_selector

logger = logging.getLogger("simmer.synthesizer")


class Simmer:
    """Callable that produces a unique CSS selector for an element.

    Instances are bound to one document scope, one query engine and one
    immutable configuration. ``configure`` returns a new instance and never
    changes this one.

    Example::

        simmer = create_simmer(document)
        selector = simmer(document.get_element_by_id("DonJulio"))
    """

    def __init__(
        self,
        scope: Any,
        config: SimmerConfig,
        query: QueryEngine,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self.scope = scope
        self.config = config
        self.query = query
        self.strategies = tuple(strategies)
        self._sink = ErrorSink(config, synthesizer=self)

    def on_error(self, exc: BaseException | str, element: Any = None) -> None:
        self._sink.report(exc, element)

    def __call__(self, element: Any) -> str | Literal[False]:
        if element is None:
            self._sink.report("No element was specified for parsing.", element, ErrorKind.USAGE)
            return False

        config = self.config
        try:
            node = self.query.wrap(element)
            hierarchy = stack_hierarchy(node, config.depth, self.query)
        except Exception as exc:
            self._sink.report(exc, element, ErrorKind.USAGE)
            return False

        state = SelectorState.for_hierarchy(len(hierarchy))
        parser = Parser(self.strategies)
        while not parser.finished() and not state.is_verified:
            try:
                step = parser.next(hierarchy, state, config, validate_selector, self.query, self.on_error)
            except Exception as exc:
                self._sink.report(exc, element)
                continue

            state = step.state
            if step.error is not None:
                self._sink.report(step.error, element, ErrorKind.STRATEGY)

            # the cycler verifies on its own; this catches a step whose verification raised
            if state.specificity >= config.specificity_threshold and state.verified is Verification.UNKNOWN:
                self._safe_verify(element, state)

        if state.verified is Verification.UNKNOWN or (
            state.verified is Verification.REJECTED and state.specificity < config.specificity_threshold
        ):
            # UNKNOWN when the threshold was never reached; Parser only verifies at or
            # above it, so the REJECTED branch guards strategies that verify on their own
            self._safe_verify(element, state)

        if not state.is_verified:
            logger.debug("No unique selector found (specificity %s).", state.specificity)
            return False

        if state.verification_depth:
            return convert_selector_state_into_css_selector(state, state.verification_depth)
        return convert_selector_state_into_css_selector(state)

    def configure(
        self,
        values: Mapping[str, Any] | None = None,
        scope: Any = None,
        **overrides: Any,
    ) -> Simmer:
        merged = {**self.config.as_dict(), **dict(values or {}), **overrides}
        new_config = configure(merged)
        new_scope = self.scope if scope is None else scope
        return create_simmer(
            new_scope,
            new_config,
            init_query_engine(new_scope, new_config.query_engine),
            strategies=self.strategies,
        )

    def _safe_verify(self, element: Any, state: SelectorState) -> bool:
        try:
            return validate_selector(element, state, self.config.selector_max_length, self.query, self.on_error)
        except Exception as exc:
            self._sink.report(exc, element)
            return False


def create_simmer(
    scope: Any,
    config: SimmerConfig | Mapping[str, Any] | None = None,
    query: QueryEngine | None = None,
    *,
    strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
) -> Simmer:
    resolved = config if isinstance(config, SimmerConfig) else configure(config)
    engine = query or init_query_engine(scope, resolved.query_engine)
    return Simmer(engine.scope, resolved, engine, strategies)
