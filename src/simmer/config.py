from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ErrorCallback

DEFAULT_DEPTH = 3
DEFAULT_SPECIFICITY_THRESHOLD = 100
DEFAULT_SELECTOR_MAX_LENGTH = 512


@dataclass(frozen=True, slots=True)
class SimmerConfig:
    depth: int = DEFAULT_DEPTH
    specificity_threshold: float = DEFAULT_SPECIFICITY_THRESHOLD
    selector_max_length: int = DEFAULT_SELECTOR_MAX_LENGTH
    error_handling: bool | ErrorCallback = False
    query_engine: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def as_dict(self) -> dict[str, Any]:
        values = {item.name: getattr(self, item.name) for item in fields(self)}
        values["query_engine"] = dict(self.query_engine)
        return values


_OPTION_NAMES = frozenset(item.name for item in fields(SimmerConfig))


def configure(values: Mapping[str, Any] | None = None, **overrides: Any) -> SimmerConfig:
    merged: dict[str, Any] = {}
    merged.update(values or {})
    merged.update(overrides)

    unknown = sorted(set(merged) - _OPTION_NAMES)
    if unknown:
        raise ValueError(f"Unknown Simmer option(s): {', '.join(unknown)}")

    if isinstance(merged.get("query_engine"), Mapping):
        merged["query_engine"] = MappingProxyType(dict(merged["query_engine"]))

    config = SimmerConfig(**merged)
    _validate(config)
    return config


def _validate(config: SimmerConfig) -> None:
    if isinstance(config.depth, bool) or not isinstance(config.depth, int) or config.depth < 0:
        raise ValueError("depth must be a non-negative integer.")

    threshold = config.specificity_threshold
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or threshold < 0:
        raise ValueError("specificity_threshold must be a non-negative number.")

    max_length = config.selector_max_length
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise ValueError("selector_max_length must be a positive integer.")

    if not isinstance(config.error_handling, bool) and not callable(config.error_handling):
        raise ValueError("error_handling must be True, False or a callable(error, element).")

    if not isinstance(config.query_engine, Mapping):
        raise ValueError("query_engine must be a mapping of engine options.")
    select = config.query_engine.get("select")
    if select is not None and not callable(select):
        raise ValueError("query_engine['select'] must be a callable(selector, scope).")
    translator = config.query_engine.get("translator", "html")
    if translator not in {"html", "xhtml", "xml"}:
        raise ValueError("query_engine['translator'] must be one of: html, xhtml, xml.")
