from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .config import SimmerConfig

logger = logging.getLogger("simmer.errors")

ErrorCallback = Callable[["SimmerError", Any], None]


class ErrorKind(Enum):
    USAGE = "usage"
    STRATEGY = "strategy"
    QUERY = "query"
    INTERNAL = "internal"


class SimmerError(Exception):
    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.INTERNAL,
        *,
        element: Any = None,
        strategy: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.element = element
        self.strategy = strategy
        self.synthesizer: Any = None
        self.reported = False
        self.aborted = False

    @classmethod
    def wrap(
        cls,
        exc: BaseException,
        kind: ErrorKind = ErrorKind.INTERNAL,
        *,
        element: Any = None,
        strategy: str | None = None,
    ) -> SimmerError:
        if isinstance(exc, SimmerError):
            return exc
        prefix = f"Strategy {strategy} failed" if strategy else "Selector synthesis failed"
        error = cls(f"{prefix}: {exc}", kind, element=element, strategy=strategy)
        error.__cause__ = exc
        return error

    def __str__(self) -> str:
        return f"Simmer: {self.message}"


class ErrorSink:
    """Single funnel for every error raised while synthesizing a selector.

    ``error_handling`` selects the policy: ``True`` re-raises, a callable is
    invoked as ``callback(error, element)``, anything falsy only logs.
    """

    def __init__(self, config: SimmerConfig, synthesizer: Any = None) -> None:
        self.policy = config.error_handling
        self.synthesizer = synthesizer

    def report(self, exc: BaseException | str, element: Any = None, kind: ErrorKind = ErrorKind.INTERNAL) -> None:
        if isinstance(exc, str):
            error = SimmerError(exc, kind, element=element)
        else:
            error = SimmerError.wrap(exc, kind, element=element)
        if error.reported:
            # already went through a sink on its way up
            if self.policy is True or error.aborted:
                raise error
            return
        error.reported = True
        if error.element is None:
            error.element = element
        error.synthesizer = self.synthesizer

        if self.policy is True:
            logger.error("%s (%s)", error, error.kind.value)
            raise error
        logger.warning("%s (%s)", error, error.kind.value)
        if callable(self.policy):
            try:
                self.policy(error, element)
            except Exception as hook_exc:
                # the callback asked to stop; later sinks re-raise without calling it again
                aborted = SimmerError.wrap(hook_exc, error.kind, element=error.element)
                aborted.reported = True
                aborted.aborted = True
                aborted.synthesizer = self.synthesizer
                raise aborted
