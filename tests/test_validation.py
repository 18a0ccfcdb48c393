from lxml import html

from simmer.errors import ErrorKind
from simmer.models import SelectorState, Verification
from simmer.query_engine import LxmlQueryEngine
from simmer.serializer import convert_selector_state_into_css_selector
from simmer.validation import validate_selector

_MARKUP = "<html><body><div id='x'><span>a</span></div><p><span>b</span></p></body></html>"


def _fixture():
    document = html.document_fromstring(_MARKUP)
    return document, LxmlQueryEngine(document), document.xpath("//span")[0]


def _no_errors(error, element) -> None:
    raise AssertionError(f"unexpected error: {error}")


def test_shortest_unique_prefix_sets_verification_depth() -> None:
    document, engine, target = _fixture()
    state = SelectorState(levels=[["span"], ["#x"], ["body"]])

    assert validate_selector(target, state, 512, engine, _no_errors)
    assert state.verified is Verification.VERIFIED
    assert state.verification_depth == 2

    shorter = convert_selector_state_into_css_selector(state, state.verification_depth)
    assert shorter == "#x > span"
    assert engine.select(shorter) == [target]


def test_full_state_match_leaves_depth_unset() -> None:
    document, engine, target = _fixture()
    state = SelectorState(levels=[["span"], ["#x"]])
    assert validate_selector(target, state, 512, engine, _no_errors)
    assert state.verification_depth is None


def test_non_unique_selector_is_rejected() -> None:
    document, engine, target = _fixture()
    state = SelectorState(levels=[["span"], []])
    assert not validate_selector(target, state, 512, engine, _no_errors)
    assert state.verified is Verification.REJECTED


def test_unique_selector_for_another_element_is_rejected() -> None:
    document, engine, target = _fixture()
    state = SelectorState(levels=[["p"]])
    assert not validate_selector(target, state, 512, engine, _no_errors)


def test_selectors_longer_than_max_length_are_rejected() -> None:
    document, engine, target = _fixture()
    state = SelectorState(levels=[["span"], ["#x"]])
    assert not validate_selector(target, state, len("#x > span") - 1, engine, _no_errors)
    assert state.verified is Verification.REJECTED


def test_invalid_selector_is_reported_as_query_error() -> None:
    document, engine, target = _fixture()
    reported = []
    state = SelectorState(levels=[["[[["]])

    assert not validate_selector(target, state, 512, engine, lambda error, element: reported.append(error))
    assert len(reported) == 1
    assert reported[0].kind is ErrorKind.QUERY
    assert reported[0].element is target
