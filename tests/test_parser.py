import pytest

from simmer.config import configure
from simmer.errors import ErrorKind, SimmerError
from simmer.models import DomNode, Proposal, SelectorState, Verification
from simmer.parser import Parser
from simmer.strategies import DEFAULT_STRATEGIES, Strategy


def _node(tag: str, attributes: dict[str, str] | None = None) -> DomNode:
    attrs = attributes or {}
    return DomNode(
        tag=tag,
        id=attrs.get("id"),
        classes=tuple(attrs.get("class", "").split()),
        attributes=attrs,
        nth_child=1,
        handle=object(),
    )


class _RecordingVerifier:
    def __init__(self, succeed: bool) -> None:
        self.succeed = succeed
        self.calls: list[list[list[str]]] = []

    def __call__(self, element, state, max_length, query, on_error) -> bool:
        self.calls.append([list(level) for level in state.levels])
        state.verified = Verification.VERIFIED if self.succeed else Verification.REJECTED
        return self.succeed


def _on_error(error, element) -> None:
    raise AssertionError(f"unexpected error: {error}")


def test_parser_applies_each_strategy_once_in_order() -> None:
    hierarchy = [_node("span", {"class": "label"}), _node("div")]
    state = SelectorState.for_hierarchy(len(hierarchy))
    parser = Parser(DEFAULT_STRATEGIES)
    verify = _RecordingVerifier(succeed=False)

    while not parser.finished():
        step = parser.next(hierarchy, state, configure(), verify, None, _on_error)
        assert step.error is None
        state = step.state

    assert parser.applied == ["id", "special_attributes", "classes", "tags", "nth_child"]
    assert state.levels == [[".label", "span", ":nth-child(1)"], ["div", ":nth-child(1)"]]


def test_next_after_finished_is_a_usage_error() -> None:
    parser = Parser([])
    assert parser.finished()
    with pytest.raises(SimmerError) as caught:
        parser.next([_node("a")], SelectorState.for_hierarchy(1), configure(), _RecordingVerifier(True), None, _on_error)
    assert caught.value.kind is ErrorKind.USAGE


def test_specificity_never_decreases_across_steps() -> None:
    hierarchy = [_node("li", {"class": "item"}), _node("ul", {"id": "menu"}), _node("body")]
    state = SelectorState.for_hierarchy(len(hierarchy))
    parser = Parser(DEFAULT_STRATEGIES)
    history = [state.specificity]

    while not parser.finished():
        state = parser.next(hierarchy, state, configure(), _RecordingVerifier(False), None, _on_error).state
        history.append(state.specificity)

    assert history == sorted(history)
    assert history[-1] > 0


def test_verification_runs_once_threshold_is_reached_and_stops_strategy() -> None:
    hierarchy = [_node("span", {"id": "y"}), _node("div", {"id": "x"})]
    state = SelectorState.for_hierarchy(len(hierarchy))
    verify = _RecordingVerifier(succeed=True)

    step = Parser(DEFAULT_STRATEGIES).next(hierarchy, state, configure(), verify, None, _on_error)

    assert step.state.is_verified
    assert verify.calls == [[["#y"], []]]
    # the ancestor id was never applied because the target was already verified
    assert step.state.levels == [["#y"], []]
    assert step.state.specificity == 100


def test_no_verification_below_threshold() -> None:
    hierarchy = [_node("span")]
    verify = _RecordingVerifier(succeed=True)
    state = SelectorState.for_hierarchy(1)
    Parser([DEFAULT_STRATEGIES[3]]).next(hierarchy, state, configure(), verify, None, _on_error)
    assert verify.calls == []
    assert state.verified is Verification.UNKNOWN


def test_failing_strategy_keeps_fragments_already_accepted() -> None:
    def explode(hierarchy, state, config):
        yield Proposal(0, ("span",), 5)
        raise RuntimeError("strategy blew up")

    hierarchy = [_node("span")]
    state = SelectorState.for_hierarchy(1)
    parser = Parser([Strategy("explode", explode), DEFAULT_STRATEGIES[4]])

    step = parser.next(hierarchy, state, configure(), _RecordingVerifier(False), None, _on_error)
    assert step.error is not None
    assert step.error.kind is ErrorKind.STRATEGY
    assert step.error.strategy == "explode"
    assert isinstance(step.error.__cause__, RuntimeError)
    assert step.state.levels == [["span"]]
    assert step.state.specificity == 5

    step = parser.next(hierarchy, step.state, configure(), _RecordingVerifier(False), None, _on_error)
    assert step.error is None
    assert step.state.levels == [["span", ":nth-child(1)"]]
    assert parser.finished()


def test_selector_state_accept_deduplicates_and_guards_levels() -> None:
    state = SelectorState.for_hierarchy(2)
    assert state.accept(Proposal(1, ("div", "div"), 5))
    assert not state.accept(Proposal(1, ("div",), 5))
    assert state.levels == [[], ["div"]]
    assert state.specificity == 10

    with pytest.raises(IndexError):
        state.accept(Proposal(2, ("p",), 1))
    with pytest.raises(ValueError):
        state.accept(Proposal(0, ("p",), -1))
