"""
Capabilities the element scope resolver needs from its host.

A browser provides these natively (DOM nodes, ``getComputedStyle``,
``document.styleSheets``). :mod:`oui_theme_builder.core.static_dom` provides
them for static HTML documents; tests provide small fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

__all__ = [
    "StyleRule",
    "HostElement",
    "Stylesheet",
    "StyleRuleEnumerator",
    "ComputedStyleProvider",
]


@dataclass(frozen=True)
class StyleRule:
    selector_text: str
    css_text: str


@runtime_checkable
class HostElement(Protocol):
    @property
    def tag_name(self) -> str: ...

    @property
    def element_id(self) -> str: ...

    @property
    def class_names(self) -> List[str]: ...

    @property
    def inline_style(self) -> Optional[str]: ...

    @property
    def parent(self) -> Optional["HostElement"]: ...

    @property
    def children(self) -> List["HostElement"]: ...

    def descendants(self) -> Iterable["HostElement"]: ...

    def matches(self, selector: str) -> bool:
        """Raise :class:`~.errors.InvalidSelectorError` for unsupported selectors."""
        ...

    def query_selector(self, selector: str) -> Optional["HostElement"]:
        """First descendant matching ``selector``; same error contract as ``matches``."""
        ...


class Stylesheet(Protocol):
    def rules(self) -> Sequence[StyleRule]:
        """Raise :class:`~.errors.StylesheetAccessError` when the sheet is unreadable."""
        ...


class StyleRuleEnumerator(Protocol):
    def stylesheets(self) -> Iterable[Stylesheet]: ...


class ComputedStyleProvider(Protocol):
    @property
    def document_element(self) -> HostElement: ...

    def get_property_value(self, element: HostElement, name: str) -> str:
        """Computed value of ``name`` (``--``-prefixed) on ``element``, ``""`` if unset."""
        ...
