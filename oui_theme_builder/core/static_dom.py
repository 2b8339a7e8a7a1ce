"""
Static HTML host for the element scope resolver.

Implements the capabilities of :mod:`.host` over an HTML document without a
browser: BeautifulSoup holds the tree, soupsieve evaluates selectors and
tinycss2 reads ``<style>`` sheets. The custom-property cascade is a
simplification of the browser's: at each level the inline declaration wins,
otherwise the last matching rule in source order (specificity and
``!important`` are not considered); values inherit from ancestors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import soupsieve
import tinycss2
from bs4 import BeautifulSoup, Tag

from .errors import InvalidSelectorError, StylesheetAccessError
from .host import StyleRule
from .logger import get_logger

log = get_logger(__name__)

__all__ = [
    "StaticElement",
    "InlineStylesheet",
    "LinkedStylesheet",
    "StaticDocument",
]

_MAX_VAR_DEPTH = 10


def _closing_paren(text: str, open_index: int) -> int:
    """Index of the parenthesis closing the one at ``open_index``, or -1."""
    depth = 0
    for index in range(open_index, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _declarations(content) -> List[Tuple[str, str]]:
    result: List[Tuple[str, str]] = []
    for node in tinycss2.parse_declaration_list(
        content, skip_comments=True, skip_whitespace=True
    ):
        if node.type == "declaration":
            result.append((node.name, tinycss2.serialize(node.value).strip()))
    return result


@dataclass(frozen=True)
class _ParsedRule:
    rule: StyleRule
    declarations: Tuple[Tuple[str, str], ...]

    def value_of(self, name: str) -> Optional[str]:
        found = None
        for decl_name, value in self.declarations:
            if decl_name == name:
                found = value
        return found


def _parse_sheet(css_text: str) -> List[_ParsedRule]:
    parsed: List[_ParsedRule] = []
    for node in tinycss2.parse_stylesheet(css_text, skip_comments=True, skip_whitespace=True):
        # At-rules (@media, @font-face, ...) are not part of the static cascade.
        if node.type != "qualified-rule":
            continue
        selector = tinycss2.serialize(node.prelude).strip()
        body = tinycss2.serialize(node.content).strip()
        parsed.append(
            _ParsedRule(
                rule=StyleRule(selector_text=selector, css_text=f"{selector} {{ {body} }}"),
                declarations=tuple(_declarations(node.content)),
            )
        )
    return parsed


class StaticElement:
    """Wraps a BeautifulSoup tag; two wrappers of the same tag compare equal."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StaticElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"StaticElement(<{self.tag_name}>)"

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def tag_name(self) -> str:
        return self._tag.name

    @property
    def element_id(self) -> str:
        return self._tag.get("id") or ""

    @property
    def class_names(self) -> List[str]:
        classes = self._tag.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        return list(classes)

    @property
    def inline_style(self) -> Optional[str]:
        return self._tag.get("style")

    @property
    def parent(self) -> Optional["StaticElement"]:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return StaticElement(parent)

    @property
    def children(self) -> List["StaticElement"]:
        return [StaticElement(child) for child in self._tag.children if isinstance(child, Tag)]

    def descendants(self) -> Iterator["StaticElement"]:
        for node in self._tag.descendants:
            if isinstance(node, Tag):
                yield StaticElement(node)

    def matches(self, selector: str) -> bool:
        try:
            return soupsieve.match(selector, self._tag)
        except soupsieve.SelectorSyntaxError as exc:
            raise InvalidSelectorError(selector, str(exc).splitlines()[0]) from exc

    def query_selector(self, selector: str) -> Optional["StaticElement"]:
        try:
            found = soupsieve.select_one(selector, self._tag)
        except soupsieve.SelectorSyntaxError as exc:
            raise InvalidSelectorError(selector, str(exc).splitlines()[0]) from exc
        return StaticElement(found) if found is not None else None


@dataclass
class InlineStylesheet:
    css_text: str
    _parsed: List[_ParsedRule] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._parsed = _parse_sheet(self.css_text)

    def rules(self) -> Sequence[StyleRule]:
        return [parsed.rule for parsed in self._parsed]

    def parsed_rules(self) -> Sequence[_ParsedRule]:
        return self._parsed


@dataclass
class LinkedStylesheet:
    """An external ``<link>`` sheet; its rules are never readable here."""

    href: str

    def rules(self) -> Sequence[StyleRule]:
        raise StylesheetAccessError(f"Stylesheet '{self.href}' is not readable from a static document")

    def parsed_rules(self) -> Sequence[_ParsedRule]:
        raise StylesheetAccessError(f"Stylesheet '{self.href}' is not readable from a static document")


class StaticDocument:
    """Static page acting as both style provider and stylesheet enumerator."""

    def __init__(self, soup: BeautifulSoup, sheets: Sequence[object]) -> None:
        self.soup = soup
        self._sheets = list(sheets)

    @classmethod
    def from_html(cls, html: str, extra_css: Iterable[str] = ()) -> "StaticDocument":
        """
        Build a document from ``html``.

        ``<style>`` elements become readable sheets and ``<link
        rel="stylesheet">`` elements unreadable ones, in document order.
        ``extra_css`` sheets (e.g. a theme being previewed) are appended last
        so they win over the page's own rules.
        """
        soup = BeautifulSoup(html, "html.parser")
        sheets: List[object] = []
        for tag in soup.find_all(["style", "link"]):
            if tag.name == "style":
                sheets.append(InlineStylesheet(tag.get_text()))
            elif "stylesheet" in (tag.get("rel") or []):
                sheets.append(LinkedStylesheet(tag.get("href", "")))
        for css in extra_css:
            sheets.append(InlineStylesheet(css))
        log.debug(f"Loaded static document with {len(sheets)} stylesheets")
        return cls(soup, sheets)

    # StyleRuleEnumerator
    def stylesheets(self) -> List[object]:
        return list(self._sheets)

    # ComputedStyleProvider
    @property
    def document_element(self) -> StaticElement:
        root = self.soup.find("html") or self.soup.find(True)
        if root is None:
            raise ValueError("Document has no elements")
        return StaticElement(root)

    def select_one(self, selector: str) -> Optional[StaticElement]:
        try:
            found = soupsieve.select_one(selector, self.soup)
        except soupsieve.SelectorSyntaxError as exc:
            raise InvalidSelectorError(selector, str(exc).splitlines()[0]) from exc
        return StaticElement(found) if found is not None else None

    def _declared_on(self, element: StaticElement, name: str) -> Optional[str]:
        inline = element.inline_style
        if inline:
            value = None
            for decl_name, decl_value in _declarations(inline):
                if decl_name == name:
                    value = decl_value
            if value is not None:
                return value

        value = None
        for sheet in self._sheets:
            try:
                parsed_rules = sheet.parsed_rules()
            except StylesheetAccessError:
                continue
            for parsed in parsed_rules:
                candidate = parsed.value_of(name)
                if candidate is None:
                    continue
                try:
                    if element.matches(parsed.rule.selector_text):
                        value = candidate
                except InvalidSelectorError:
                    continue
        return value

    def _computed(self, element: StaticElement, name: str, depth: int) -> str:
        node: Optional[StaticElement] = element
        while node is not None:
            value = self._declared_on(node, name)
            if value is not None:
                # var() inside a custom property resolves where it is declared.
                return self._substitute(node, value, depth)
            node = node.parent
        return ""

    def _substitute(self, node: StaticElement, value: str, depth: int) -> str:
        if depth <= 0 or "var(" not in value:
            return value

        parts: List[str] = []
        pos = 0
        while True:
            start = value.find("var(", pos)
            end = _closing_paren(value, start + 3) if start >= 0 else -1
            if end < 0:
                parts.append(value[pos:])
                break
            parts.append(value[pos:start])
            parts.append(self._resolve_reference(node, value[start : end + 1], depth))
            pos = end + 1
        return "".join(parts)

    def _resolve_reference(self, node: StaticElement, reference: str, depth: int) -> str:
        name, sep, fallback = reference[4:-1].partition(",")
        referenced = self._computed(node, name.strip(), depth - 1)
        if referenced:
            return referenced
        if sep:
            return self._substitute(node, fallback.strip(), depth - 1)
        return reference

    def get_property_value(self, element: StaticElement, name: str) -> str:
        return self._computed(element, name, _MAX_VAR_DEPTH)
