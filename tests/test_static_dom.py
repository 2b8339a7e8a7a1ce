"""
Tests for the static HTML host (BeautifulSoup + soupsieve + tinycss2).
"""

import pytest

from oui_theme_builder.core.errors import InvalidSelectorError, StylesheetAccessError
from oui_theme_builder.core.host import HostElement
from oui_theme_builder.core.scope_resolver import ElementCssVariable, ElementScopeResolver
from oui_theme_builder.core.static_dom import (
    InlineStylesheet,
    LinkedStylesheet,
    StaticDocument,
)

PAGE = """<html>
<head>
<style>
:root {
  --oui-color-primary: 176 132 233;
  --oui-color-accent: var(--oui-color-primary);
  --oui-color-shadow: var(--oui-missing, 0 0 0);
  --oui-color-ghost: var(--oui-nothing);
  --oui-rounded: 4px;
}
.card { --oui-color-primary: 1 2 3; }
.btn { color: rgb(var(--oui-color-primary)); border-radius: var(--oui-rounded, 2px); }
@media (min-width: 10px) { .btn { --oui-rounded: 99px; } }
</style>
<link rel="stylesheet" href="https://cdn.example.com/app.css">
</head>
<body>
<div id="app">
  <div class="card orderly-card" style="--oui-rounded: 8px">
    <button class="btn primary">A</button>
    <button class="btn secondary">B</button>
  </div>
</div>
</body>
</html>
"""


@pytest.fixture
def document():
    return StaticDocument.from_html(PAGE)


class TestStylesheets:
    def test_style_and_link_sheets(self, document):
        sheets = document.stylesheets()
        assert isinstance(sheets[0], InlineStylesheet)
        assert isinstance(sheets[1], LinkedStylesheet)
        assert sheets[1].href == "https://cdn.example.com/app.css"

    def test_linked_sheet_is_unreadable(self, document):
        with pytest.raises(StylesheetAccessError):
            document.stylesheets()[1].rules()

    def test_at_rules_are_skipped(self, document):
        selectors = [rule.selector_text for rule in document.stylesheets()[0].rules()]
        assert selectors == [":root", ".card", ".btn"]

    def test_extra_css_is_appended_last(self):
        doc = StaticDocument.from_html(PAGE, extra_css=[":root { --oui-rounded: 5px; }"])
        assert len(doc.stylesheets()) == 3
        assert doc.stylesheets()[-1].rules()[0].css_text == ":root { --oui-rounded: 5px; }"


class TestStaticElement:
    def test_attributes(self, document):
        card = document.select_one(".card")
        assert isinstance(card, HostElement)
        assert card.tag_name == "div"
        assert card.class_names == ["card", "orderly-card"]
        assert card.inline_style == "--oui-rounded: 8px"
        assert card.parent.element_id == "app"
        assert [child.tag_name for child in card.children] == ["button", "button"]

    def test_identity(self, document):
        assert document.select_one(".btn") == document.select_one("button.primary")
        assert hash(document.select_one(".btn")) == hash(document.select_one("button.primary"))
        assert document.select_one(".btn") != document.select_one(".secondary")

    def test_matches_and_query(self, document):
        card = document.select_one(".card")
        assert card.matches("#app > .card")
        assert not card.matches(".btn")
        assert card.query_selector(".secondary") == document.select_one("button.secondary")
        assert card.query_selector(".missing") is None

    def test_invalid_selector(self, document):
        card = document.select_one(".card")
        with pytest.raises(InvalidSelectorError):
            card.matches("a[href")
        with pytest.raises(InvalidSelectorError):
            card.query_selector("a[href")
        with pytest.raises(InvalidSelectorError):
            document.select_one("a[href")

    def test_document_element(self, document):
        root = document.document_element
        assert root.tag_name == "html"
        assert root.parent is None


class TestComputedValues:
    def test_inherited_from_nearest_declaration(self, document):
        button = document.select_one(".btn")
        assert document.get_property_value(button, "--oui-color-primary") == "1 2 3"
        assert document.get_property_value(button, "--oui-rounded") == "8px"

    def test_root_value(self, document):
        assert (
            document.get_property_value(document.document_element, "--oui-color-primary")
            == "176 132 233"
        )

    def test_var_resolved_where_declared(self, document):
        """A var() in a :root declaration resolves against :root, not the element."""
        button = document.select_one(".btn")
        assert document.get_property_value(button, "--oui-color-accent") == "176 132 233"

    def test_fallback_and_unresolved(self, document):
        root = document.document_element
        assert document.get_property_value(root, "--oui-color-shadow") == "0 0 0"
        assert document.get_property_value(root, "--oui-color-ghost") == "var(--oui-nothing)"

    def test_fallback_with_parentheses(self):
        """Fallbacks containing function calls do not block substitution."""
        doc = StaticDocument.from_html(
            "<html><body><div id='a'></div></body></html>",
            extra_css=[
                ":root { --oui-color-primary: 1 2 3;"
                " --oui-x: var(--oui-color-primary, rgb(0 0 0));"
                " --oui-y: var(--oui-missing, rgb(0 0 0)); }"
            ],
        )
        element = doc.select_one("#a")
        assert doc.get_property_value(element, "--oui-x") == "1 2 3"
        assert doc.get_property_value(element, "--oui-y") == "rgb(0 0 0)"

    def test_nested_fallback(self):
        doc = StaticDocument.from_html(
            "<html><body><div id='a'></div></body></html>",
            extra_css=[
                ":root { --oui-color-primary: 1 2 3;"
                " --oui-x: var(--oui-missing, var(--oui-color-primary));"
                " --oui-y: var(--oui-missing, var(--oui-other, 4 5 6)); }"
            ],
        )
        element = doc.select_one("#a")
        assert doc.get_property_value(element, "--oui-x") == "1 2 3"
        assert doc.get_property_value(element, "--oui-y") == "4 5 6"

    def test_unset(self, document):
        assert document.get_property_value(document.document_element, "--oui-unknown") == ""

    def test_extra_css_wins(self):
        doc = StaticDocument.from_html(PAGE, extra_css=[":root { --oui-color-primary: 9 9 9; }"])
        assert doc.get_property_value(doc.document_element, "--oui-color-primary") == "9 9 9"
        button = doc.select_one(".btn")
        assert doc.get_property_value(button, "--oui-color-accent") == "9 9 9"

    def test_self_reference_terminates(self):
        doc = StaticDocument.from_html(
            "<html><head><style>:root { --oui-a: var(--oui-a); }</style></head><body></body></html>"
        )
        assert "var(--oui-a)" in doc.get_property_value(doc.document_element, "--oui-a")


class TestResolverOverStaticDocument:
    def test_extract_variables_for_card(self, document):
        resolver = ElementScopeResolver(document, document)
        variables = resolver.extract_variables(document.select_one(".card"))
        assert variables == [
            ElementCssVariable("oui-color-primary", "176 132 233", "1 2 3"),
            ElementCssVariable("oui-rounded", "8px", "8px"),
        ]

    def test_element_path(self, document):
        resolver = ElementScopeResolver(document, document)
        assert (
            resolver.element_path(document.select_one(".secondary"))
            == "div#app > div.card > button.btn.secondary:nth-of-type(2)"
        )

    def test_root_variables_skip_unreadable_sheets(self, document):
        declared = ElementScopeResolver(document, document).collect_root_variables()
        assert declared["oui-color-primary"] == "176 132 233"
        assert declared["oui-color-accent"] == "var(--oui-color-primary)"
        assert declared["oui-rounded"] == "4px"
