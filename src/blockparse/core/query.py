"""Declarative matchers evaluated against a parsed markup fragment

A matcher pairs an optional CSS selector with an extractor. Matchers are only
built through the functions below, so a plain callable is never mistaken for one.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter
from soupsieve import SelectorSyntaxError


logger = logging.getLogger(__name__)

FragmentParser = Callable[[str], Tag]


def parse_fragment(raw: str) -> Tag:
    """Parse a markup fragment into a tree whose root holds its top-level nodes."""
    return BeautifulSoup(raw, "html.parser")


def _attr_value(node: Tag, name: str) -> Optional[str]:
    value = node.get(name)
    if isinstance(value, list):   # multi-valued attributes such as class
        return " ".join(value)
    return value


def _substitute_entities(text: str) -> str:
    return EntitySubstitution.substitute_xml(text).replace('\xa0', '&nbsp;')


class SourceFormatter(HTMLFormatter):
    """Writes markup the way it is usually authored: source attribute order,
    unclosed void tags, and non-breaking spaces as &nbsp;."""

    def attributes(self, tag: Tag):
        return list(tag.attrs.items()) if tag.attrs else []


SOURCE_FORMATTER = SourceFormatter(
    entity_substitution=_substitute_entities,
    void_element_close_prefix=None,
)


def inner_markup(node: Tag) -> str:
    """Return the serialized markup of node's children."""
    return node.decode_contents(formatter=SOURCE_FORMATTER)


PROPERTIES: dict[str, Callable[[Tag], Any]] = {
    "textContent": lambda n: n.get_text(),
    "innerHTML":   lambda n: inner_markup(n),
    "outerHTML":   lambda n: inner_markup(n) if isinstance(n, BeautifulSoup) else n.decode(formatter=SOURCE_FORMATTER),
    "nodeName":    lambda n: n.name.upper(),
    "className":   lambda n: _attr_value(n, "class") or "",
    "id":          lambda n: _attr_value(n, "id"),
    "src":         lambda n: _attr_value(n, "src"),
    "href":        lambda n: _attr_value(n, "href"),
    "alt":         lambda n: _attr_value(n, "alt"),
    "title":       lambda n: _attr_value(n, "title"),
    "value":       lambda n: _attr_value(n, "value"),
}


def _select(tree: Tag, selector: Optional[str]) -> Optional[Tag]:
    """Return the first node matching selector (the root when None), else None."""
    if selector is None:
        return tree
    try:
        return tree.select_one(selector)
    except SelectorSyntaxError as e:
        logger.warning("Invalid selector %r: %s", selector, e)
        return None


class Matcher:
    """Base type for all matchers; subclasses implement extract()."""
    selector: Optional[str]

    def extract(self, node: Tag) -> Any:
        raise NotImplementedError

    def evaluate(self, tree: Tag) -> Any:
        node = _select(tree, self.selector)
        if node is None:
            return None
        return self.extract(node)


@dataclass(frozen=True)
class TextMatcher(Matcher):
    selector: Optional[str] = None

    def extract(self, node: Tag) -> str:
        return node.get_text()


@dataclass(frozen=True)
class ChildrenMatcher(Matcher):
    selector: Optional[str] = None

    def extract(self, node: Tag) -> str:
        return inner_markup(node)


@dataclass(frozen=True)
class AttrMatcher(Matcher):
    selector: Optional[str]
    name: str

    def extract(self, node: Tag) -> Optional[str]:
        return _attr_value(node, self.name)


@dataclass(frozen=True)
class PropMatcher(Matcher):
    selector: Optional[str]
    name: str

    def extract(self, node: Tag) -> Any:
        return PROPERTIES[self.name](node)


@dataclass(frozen=True)
class QueryMatcher(Matcher):
    """Evaluates an inner matcher (or mapping of matchers) once per selected node."""
    selector: str
    inner: Union[Matcher, Mapping[str, Matcher]]

    def evaluate(self, tree: Tag) -> list:
        try:
            nodes = tree.select(self.selector)
        except SelectorSyntaxError as e:
            logger.warning("Invalid selector %r: %s", self.selector, e)
            return []
        return [self.extract(node) for node in nodes]

    def extract(self, node: Tag) -> Any:
        if isinstance(self.inner, Matcher):
            return self.inner.evaluate(node)
        return {key: m.evaluate(node) for key, m in self.inner.items()}


def text(selector: Optional[str] = None) -> TextMatcher:
    return TextMatcher(selector)


def children(selector: Optional[str] = None) -> ChildrenMatcher:
    return ChildrenMatcher(selector)


html = children


def attr(selector: Optional[str], name: str) -> AttrMatcher:
    return AttrMatcher(selector, name)


def prop(selector: Optional[str], name: str) -> PropMatcher:
    """Extract a DOM-style property; name must be one of PROPERTIES."""
    if name not in PROPERTIES:
        raise ValueError(f"Unknown property {name!r}; expected one of {sorted(PROPERTIES)}")
    return PropMatcher(selector, name)


def query(selector: str, inner: Union[Matcher, Mapping[str, Matcher]]) -> QueryMatcher:
    """Collect one result per node matching selector."""
    if not isinstance(inner, Matcher):
        if not isinstance(inner, Mapping) or not all(isinstance(m, Matcher) for m in inner.values()):
            raise TypeError("query() expects a matcher or a mapping of matchers")
    return QueryMatcher(selector, inner)


def evaluate(matcher: Matcher, tree: Tag) -> Any:
    """Evaluate a matcher against an already parsed fragment tree."""
    return matcher.evaluate(tree)
