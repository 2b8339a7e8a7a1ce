"""
Tests for ElementScopeResolver against a small in-memory host.
"""

from typing import Dict, List, Optional

import pytest

from oui_theme_builder.core.errors import InvalidSelectorError, StylesheetAccessError
from oui_theme_builder.core.host import HostElement, StyleRule
from oui_theme_builder.core.overrides import OVERRIDE_MARKER
from oui_theme_builder.core.scope_resolver import (
    ElementCssVariable,
    ElementScopeResolver,
    strip_pseudo_classes,
)
from oui_theme_builder.core.settings import EngineSettings


class FakeElement:
    """Element that matches only the selectors it is told about.

    Selectors containing ``:`` that it was not told about are treated as
    unsupported and raise, like a host that cannot evaluate pseudo-classes.
    """

    def __init__(self, tag, element_id="", classes=(), style=None, children=(), selectors=()):
        self.tag_name = tag
        self.element_id = element_id
        self.class_names = list(classes)
        self.inline_style = style
        self.parent = None
        self.children = list(children)
        self.selectors = set(selectors)
        for child in self.children:
            child.parent = self

    def descendants(self):
        for child in self.children:
            yield child
            yield from child.descendants()

    def matches(self, selector):
        if selector in self.selectors:
            return True
        if ":" in selector:
            raise InvalidSelectorError(selector, "unsupported")
        return False

    def query_selector(self, selector):
        for node in self.descendants():
            if node.matches(selector):
                return node
        return None


class FakeSheet:
    def __init__(self, *rules):
        self._rules = [StyleRule(selector, css) for selector, css in rules]

    def rules(self):
        return self._rules


class BrokenSheet:
    def rules(self):
        raise StylesheetAccessError("cross-origin")


class FakeHost:
    """Computed-style provider and stylesheet enumerator in one."""

    def __init__(self, root, sheets=(), computed=None):
        self.root = root
        self.sheets = list(sheets)
        self.computed: Dict[FakeElement, Dict[str, str]] = computed or {}

    @property
    def document_element(self):
        return self.root

    def get_property_value(self, element, name):
        return self.computed.get(element, {}).get(name, "")

    def stylesheets(self):
        return self.sheets


def _resolver(host, settings=None):
    return ElementScopeResolver(host, host, settings)


def test_fake_element_satisfies_host_protocol():
    assert isinstance(FakeElement("div"), HostElement)


class TestCollectVariableNames:
    def test_inline_descendants_and_rules(self):
        """Names come from inline styles, descendants and targeting rules."""
        button = FakeElement(
            "button",
            style="background: rgb(var(--oui-rounded)); --other-x: 1px",
            selectors={".btn"},
        )
        card = FakeElement(
            "div",
            style="--oui-color-primary: 1 2 3; color: rgb(var(--oui-color-line))",
            children=[button],
        )
        root = FakeElement("html", children=[FakeElement("body", children=[card])])
        host = FakeHost(
            root,
            sheets=[
                FakeSheet(
                    (".btn", ".btn { color: rgb(var(--oui-color-danger)); }"),
                    (".nope", ".nope { margin: var(--oui-spacing-xs); }"),
                    ("a:hover", "a:hover { color: rgb(var(--oui-color-link)); }"),
                    ("", "{ color: var(--oui-color-fill); }"),
                ),
                BrokenSheet(),
            ],
        )

        names = _resolver(host).collect_variable_names(card)

        assert names == {
            "oui-color-primary",
            "oui-color-line",
            "oui-rounded",
            "oui-color-danger",
        }

    def test_custom_prefix(self):
        """Only names with the configured prefix are reported."""
        element = FakeElement("div", style="--brand-x: 1; --oui-rounded: 2px")
        host = FakeHost(FakeElement("html"))
        resolver = _resolver(host, EngineSettings(variable_prefix="brand-"))
        assert resolver.collect_variable_names(element) == {"brand-x"}


class TestExtractVariables:
    def test_value_precedence_and_sorting(self):
        element = FakeElement("div", style="--oui-color-primary: 9 9 9", selectors={".x"})
        root = FakeElement("html")
        host = FakeHost(
            root,
            sheets=[
                FakeSheet(
                    (".x", ".x { color: rgb(var(--oui-color-danger)); border-radius: var(--oui-rounded); }")
                )
            ],
            computed={
                element: {"--oui-color-primary": "9 9 9", "--oui-color-danger": "5 5 5"},
                root: {"--oui-color-primary": "1 1 1", "--oui-color-danger": "2 2 2"},
            },
        )

        variables = _resolver(host).extract_variables(element)

        # oui-rounded has no value anywhere and is dropped.
        assert variables == [
            ElementCssVariable("oui-color-danger", "2 2 2", "5 5 5"),
            ElementCssVariable("oui-color-primary", "9 9 9", "9 9 9"),
        ]

    def test_inline_only_value(self):
        element = FakeElement("div", style="--oui-rounded: 8px;")
        host = FakeHost(FakeElement("html"))
        assert _resolver(host).extract_variables(element) == [
            ElementCssVariable("oui-rounded", "8px", "8px")
        ]

    def test_nothing_relevant(self):
        element = FakeElement("div", style="color: red")
        assert _resolver(FakeHost(FakeElement("html"))).extract_variables(element) == []


class TestExtractScopedVariables:
    @pytest.fixture
    def chain(self):
        child = FakeElement("span", style="--oui-color-primary: 1 1 1")
        parent = FakeElement(
            "div",
            style="--oui-color-primary: 2 2 2; --oui-custom-x: 3px; --oui-rounded: 8px",
            children=[child],
        )
        grand = FakeElement("section", style="--oui-spacing-xs: 1rem", children=[parent])
        host = FakeHost(FakeElement("html", children=[FakeElement("body", children=[grand])]))
        return _resolver(host), [child, parent, grand]

    def test_inner_occurrence_wins_and_schema_only(self, chain):
        resolver, path = chain
        scoped = resolver.extract_scoped_variables(path, path[1])
        assert [(var.name, var.value) for var in scoped] == [
            ("oui-color-primary", "1 1 1"),
            ("oui-rounded", "8px"),
        ]

    def test_outer_selection_includes_inner_elements(self, chain):
        resolver, path = chain
        names = {var.name for var in resolver.extract_scoped_variables(path, path[2])}
        assert names == {"oui-color-primary", "oui-rounded", "oui-spacing-xs"}

    def test_selected_outside_path(self, chain):
        resolver, path = chain
        scoped = resolver.extract_scoped_variables(path[:1], path[2])
        # Only the selected element itself is inspected.
        assert [var.name for var in scoped] == ["oui-spacing-xs"]


def test_collect_root_variables():
    host = FakeHost(
        FakeElement("html"),
        sheets=[
            FakeSheet(
                (":root", ":root { --oui-color-primary: 1 2 3; --other: x; }"),
                ("html,  body", "html,  body { --oui-rounded: 4px; }"),
                (".btn", ".btn { --oui-rounded-lg: 10px; }"),
            ),
            BrokenSheet(),
        ],
    )
    assert _resolver(host).collect_root_variables() == {
        "oui-color-primary": "1 2 3",
        "oui-rounded": "4px",
    }


class TestPaths:
    @pytest.fixture
    def page(self):
        primary = FakeElement("button", classes=["btn", "primary"])
        secondary = FakeElement("button", classes=["btn", "secondary", "orderly-x", "extra"])
        card = FakeElement("div", classes=["card"], children=[primary, secondary])
        app = FakeElement("div", element_id="app", children=[card])
        body = FakeElement("body", children=[app])
        FakeElement("html", children=[body])
        return {"app": app, "card": card, "secondary": secondary}

    def test_element_path(self, page):
        resolver = _resolver(FakeHost(FakeElement("html")))
        assert (
            resolver.element_path(page["secondary"])
            == "div#app > div.card > button.btn.secondary:nth-of-type(2)"
        )

    def test_element_path_without_id(self):
        span = FakeElement("SPAN")
        section = FakeElement("section", children=[span])
        FakeElement("body", children=[section])
        resolver = _resolver(FakeHost(FakeElement("html")))
        assert resolver.element_path(span) == "section > span"

    def test_element_path_of_body_is_empty(self):
        resolver = _resolver(FakeHost(FakeElement("html")))
        assert resolver.element_path(FakeElement("body")) == ""

    def test_selection_path_stops_at_body(self, page):
        resolver = _resolver(FakeHost(FakeElement("html")))
        path = resolver.selection_path(page["secondary"])
        assert path == [page["secondary"], page["card"], page["app"]]

    def test_selection_path_is_capped(self):
        leaf = FakeElement("i")
        node = leaf
        for _ in range(8):
            node = FakeElement("div", children=[node])
        FakeElement("body", children=[node])
        resolver = _resolver(FakeHost(FakeElement("html")))

        assert len(resolver.selection_path(leaf)) == 6
        capped = _resolver(FakeHost(FakeElement("html")), EngineSettings(max_ancestors=2))
        assert len(capped.selection_path(leaf)) == 3

    def test_selection_path_label(self, page):
        resolver = _resolver(FakeHost(FakeElement("html")))
        path = resolver.selection_path(page["secondary"])
        assert (
            resolver.selection_path_label(path)
            == "div#app > div.card > button.btn.secondary:nth-of-type(2)"
        )


class TestOverrideMatching:
    def test_strip_pseudo_classes(self):
        assert strip_pseudo_classes(".btn:hover") == ".btn"
        assert strip_pseudo_classes("li:not(.active) > a:focus") == "li > a"
        assert strip_pseudo_classes(".card::before") == ".card::before"

    def test_matching_override_rules(self):
        element = FakeElement("button", classes=["btn"], selectors={".btn"})
        document = (
            ":root {}\n\n"
            f"{OVERRIDE_MARKER}\n"
            ".btn { color: red; }\n"
            ".btn:hover { color: blue; }\n"
            ".card::before { content: 'x'; }\n"
            ".other { margin: 0; }"
        )
        resolver = _resolver(FakeHost(FakeElement("html")))

        matched = resolver.matching_override_rules(element, document)

        assert [rule.selector for rule in matched] == [".btn", ".btn:hover"]

    def test_no_region(self):
        resolver = _resolver(FakeHost(FakeElement("html")))
        assert resolver.matching_override_rules(FakeElement("a"), ":root {}") == []
        assert resolver.matching_override_rules(FakeElement("a"), None) == []


def test_scoped_variant_ignores_ancestors_beyond_the_path():
    """Ancestors past the selection path do not contribute variables."""
    element = FakeElement("span", style="--oui-color-primary: 1 1 1")
    a = FakeElement("div", style="--oui-color-danger: 2 2 2", children=[element])
    b = FakeElement("div", style="--oui-rounded: 3px", children=[a])
    c = FakeElement("section", style="--oui-spacing-xs: 4rem", children=[b])
    FakeElement("body", children=[c])
    resolver = _resolver(FakeHost(FakeElement("html")), EngineSettings(max_ancestors=2))

    path = resolver.selection_path(element)
    assert path == [element, a, b]

    names = {var.name for var in resolver.extract_scoped_variables(path, path[-1])}
    assert names == {"oui-color-primary", "oui-color-danger", "oui-rounded"}
