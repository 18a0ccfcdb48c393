from lxml import html

from simmer.hierarchy import stack_hierarchy
from simmer.query_engine import LxmlQueryEngine

_MARKUP = "<html><body><main><section><article><p>deep</p></article></section></main></body></html>"


def test_hierarchy_is_bounded_by_depth() -> None:
    document = html.document_fromstring(_MARKUP)
    engine = LxmlQueryEngine(document)
    target = engine.wrap(document.xpath("//p")[0])

    chain = stack_hierarchy(target, 2, engine)
    assert [node.tag for node in chain] == ["p", "article", "section"]


def test_depth_zero_keeps_only_the_target() -> None:
    document = html.document_fromstring(_MARKUP)
    engine = LxmlQueryEngine(document)
    target = engine.wrap(document.xpath("//p")[0])

    chain = stack_hierarchy(target, 0, engine)
    assert len(chain) == 1
    assert chain[0].handle is document.xpath("//p")[0]


def test_hierarchy_stops_at_document_root() -> None:
    document = html.document_fromstring(_MARKUP)
    engine = LxmlQueryEngine(document)
    target = engine.wrap(document.xpath("//p")[0])

    chain = stack_hierarchy(target, 50, engine)
    assert [node.tag for node in chain] == ["p", "article", "section", "main", "body", "html"]
