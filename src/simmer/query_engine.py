from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, Sequence

from lxml import etree, html
from lxml.cssselect import CSSSelector

from .models import DomNode

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle, Page

CustomSelect = Callable[[str, Any], Sequence[Any]]


class QueryEngine(Protocol):
    scope: Any

    def wrap(self, element: Any) -> DomNode: ...

    def parent(self, node: DomNode) -> DomNode | None: ...

    def select(self, selector: str) -> list[Any]: ...

    def is_same(self, left: Any, right: Any) -> bool: ...


class LxmlQueryEngine:
    """Query capability over an in-memory ``lxml.html`` document."""

    def __init__(self, scope: Any, options: Mapping[str, Any] | None = None) -> None:
        opts = dict(options or {})
        self.scope = _resolve_lxml_root(scope)
        self.translator = str(opts.get("translator") or "html")
        self._custom_select: CustomSelect | None = opts.get("select")

    def wrap(self, element: Any) -> DomNode:
        if not isinstance(element, etree._Element) or not isinstance(element.tag, str):
            raise TypeError(f"Cannot wrap {element!r}: not an lxml element node.")

        tag = _local_name(element.tag)
        attributes = {str(key): str(value) for key, value in element.attrib.items()}
        nth_child: int | None = None
        parent = element.getparent()
        if parent is not None:
            siblings = [child for child in parent if isinstance(child.tag, str)]
            nth_child = siblings.index(element) + 1

        return DomNode(
            tag=tag,
            id=attributes.get("id") or None,
            classes=tuple(_split_classes(attributes.get("class"))),
            attributes=attributes,
            nth_child=nth_child,
            handle=element,
        )

    def parent(self, node: DomNode) -> DomNode | None:
        parent = node.handle.getparent()
        if parent is None:
            return None
        return self.wrap(parent)

    def select(self, selector: str) -> list[Any]:
        if self._custom_select is not None:
            return list(self._custom_select(selector, self.scope))
        return list(CSSSelector(selector, translator=self.translator)(self.scope))

    def is_same(self, left: Any, right: Any) -> bool:
        return left is right


_SNAPSHOT_SCRIPT = """
(el) => {
  const attrs = {};
  for (const attr of Array.from(el.attributes || [])) {
    attrs[attr.name] = attr.value;
  }
  const parent = el.parentElement;
  let nthChild = null;
  if (parent) {
    const siblings = Array.from(parent.children);
    nthChild = siblings.indexOf(el) + 1;
  }
  return {
    tag: (el.tagName || '').toLowerCase(),
    id: el.id || null,
    classes: Array.from(el.classList || []),
    attributes: attrs,
    nth_child: nthChild,
  };
}
"""


class PlaywrightQueryEngine:
    """Query capability over a live Playwright page (sync API)."""

    def __init__(self, scope: Page, options: Mapping[str, Any] | None = None) -> None:
        opts = dict(options or {})
        self.scope = scope
        self._custom_select: CustomSelect | None = opts.get("select")

    def wrap(self, element: ElementHandle) -> DomNode:
        payload = element.evaluate(_SNAPSHOT_SCRIPT)
        if not isinstance(payload, dict) or not payload.get("tag"):
            raise TypeError(f"Cannot wrap {element!r}: not an element handle.")

        attributes = {str(k): str(v) for k, v in dict(payload.get("attributes") or {}).items()}
        return DomNode(
            tag=str(payload["tag"]),
            id=payload.get("id") or None,
            classes=tuple(str(item) for item in payload.get("classes") or [] if item),
            attributes=attributes,
            nth_child=_optional_int(payload.get("nth_child")),
            handle=element,
        )

    def parent(self, node: DomNode) -> DomNode | None:
        handle = node.handle.evaluate_handle("(el) => el.parentElement")
        parent = handle.as_element()
        if parent is None:
            handle.dispose()
            return None
        return self.wrap(parent)

    def select(self, selector: str) -> list[Any]:
        if self._custom_select is not None:
            return list(self._custom_select(selector, self.scope))
        return list(self.scope.query_selector_all(selector))

    def is_same(self, left: Any, right: Any) -> bool:
        if left is right:
            return True
        return bool(left.evaluate("(node, other) => node === other", right))


def init_query_engine(scope: Any, options: Mapping[str, Any] | None = None) -> QueryEngine:
    if scope is None:
        raise ValueError("A document scope (lxml document, HTML string or Playwright page) is required.")
    if _looks_like_page(scope):
        return PlaywrightQueryEngine(scope, options)
    return LxmlQueryEngine(scope, options)


def _looks_like_page(scope: Any) -> bool:
    return callable(getattr(scope, "query_selector_all", None)) and callable(getattr(scope, "evaluate", None))


def _resolve_lxml_root(scope: Any) -> Any:
    if isinstance(scope, (str, bytes)):
        return html.document_fromstring(scope)
    if isinstance(scope, etree._ElementTree):
        return scope.getroot()
    if isinstance(scope, etree._Element):
        return scope.getroottree().getroot()
    raise TypeError(f"Unsupported document scope: {type(scope).__name__}")


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        tag = tag.split("}", 1)[1]
    return tag.lower()


def _split_classes(raw: str | None) -> list[str]:
    if not raw:
        return []
    seen: set[str] = set()
    classes: list[str] = []
    for item in raw.split():
        if item in seen:
            continue
        seen.add(item)
        classes.append(item)
    return classes


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
