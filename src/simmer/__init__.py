from __future__ import annotations

from .config import SimmerConfig, configure
from .errors import ErrorKind, ErrorSink, SimmerError
from .hierarchy import stack_hierarchy
from .models import DomNode, Proposal, SelectorState, StepResult, Verification
from .parser import Parser
from .query_engine import LxmlQueryEngine, PlaywrightQueryEngine, QueryEngine, init_query_engine
from .serializer import convert_selector_state_into_css_selector
from .strategies import DEFAULT_STRATEGIES, Strategy
from .synthesizer import Simmer, create_simmer
from .validation import validate_selector

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_STRATEGIES",
    "DomNode",
    "ErrorKind",
    "ErrorSink",
    "LxmlQueryEngine",
    "Parser",
    "PlaywrightQueryEngine",
    "Proposal",
    "QueryEngine",
    "SelectorState",
    "Simmer",
    "SimmerConfig",
    "SimmerError",
    "StepResult",
    "Strategy",
    "Verification",
    "configure",
    "convert_selector_state_into_css_selector",
    "create_simmer",
    "init_query_engine",
    "stack_hierarchy",
    "validate_selector",
]
