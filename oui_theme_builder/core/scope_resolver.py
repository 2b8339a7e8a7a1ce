"""
Element scope resolution for the theme inspector.

Given an element of the rendered page, find the theme variables that can
affect it (declared or used on it, on its descendants, or in stylesheet rules
that target it or something inside it) and report the value each one has.
All page access goes through the host capabilities in :mod:`.host`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set

from .errors import InvalidSelectorError, StylesheetAccessError
from .host import ComputedStyleProvider, HostElement, StyleRule, StyleRuleEnumerator
from .logger import get_logger
from .overrides import OverrideRule, list_override_rules
from .settings import EngineSettings
from .theme_schema import is_allowed_variable

log = get_logger(__name__)

__all__ = [
    "ElementCssVariable",
    "ElementScopeResolver",
    "strip_pseudo_classes",
]

_INLINE_DECLARATION = re.compile(r"--([a-zA-Z0-9-]+)\s*:")
_VAR_USAGE = re.compile(r"var\(\s*--([^),\s]+)")
# A single-colon pseudo-class with an optional argument list; `::x` is left alone.
_PSEUDO_CLASS = re.compile(r"(?<!:):(?!:)[a-zA-Z-]+(?:\([^()]*\))?")
_WHITESPACE = re.compile(r"\s+")
_ROOT_SELECTORS = {":root", "html", "html, body"}


@dataclass(frozen=True)
class ElementCssVariable:
    name: str
    value: str
    computed_value: str


def strip_pseudo_classes(selector: str) -> str:
    """Remove state pseudo-classes (``:hover``, ``:not(.x)``) keeping ``::pseudo-elements``."""

    stripped = _PSEUDO_CLASS.sub("", selector)
    return _WHITESPACE.sub(" ", stripped).strip()


class ElementScopeResolver:
    """Resolves which theme variables and override rules apply to an element."""

    def __init__(
        self,
        styles: ComputedStyleProvider,
        rules: StyleRuleEnumerator,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.styles = styles
        self.rules = rules
        self.settings = settings or EngineSettings()

    # ------------------------------------------------------------------
    # Variable discovery
    # ------------------------------------------------------------------
    def _accessible_rules(self) -> List[StyleRule]:
        collected: List[StyleRule] = []
        for sheet in self.rules.stylesheets():
            try:
                collected.extend(sheet.rules())
            except StylesheetAccessError as exc:
                log.debug(f"Skipping inaccessible stylesheet: {exc}")
        return collected

    def _wanted(self, name: str) -> bool:
        return name.startswith(self.settings.variable_prefix)

    def _names_in_inline_style(self, element: HostElement) -> Set[str]:
        style = element.inline_style
        if not style:
            return set()
        found = set(_INLINE_DECLARATION.findall(style))
        found.update(_VAR_USAGE.findall(style))
        return {name.strip() for name in found if self._wanted(name.strip())}

    def _names_in_rules(self, element: HostElement, rules: Sequence[StyleRule]) -> Set[str]:
        found: Set[str] = set()
        for rule in rules:
            selector = rule.selector_text
            if not selector:
                continue
            try:
                targeted = element.matches(selector) or element.query_selector(selector) is not None
            except InvalidSelectorError:
                continue
            if not targeted:
                continue
            for name in _VAR_USAGE.findall(rule.css_text):
                name = name.strip()
                if self._wanted(name):
                    found.add(name)
        return found

    def collect_variable_names(self, element: HostElement) -> Set[str]:
        """Names (without ``--``) of prefixed variables relevant to ``element`` or its subtree."""

        rules = self._accessible_rules()
        names: Set[str] = set()
        for node in [element, *element.descendants()]:
            names.update(self._names_in_inline_style(node))
            names.update(self._names_in_rules(node, rules))
        return names

    # ------------------------------------------------------------------
    # Value resolution
    # ------------------------------------------------------------------
    @staticmethod
    def _inline_value(element: HostElement, name: str) -> str:
        style = element.inline_style
        if not style:
            return ""
        match = re.search(rf"--{re.escape(name)}:\s*([^;]+)", style)
        return match.group(1).strip() if match else ""

    def extract_variables(self, element: HostElement) -> List[ElementCssVariable]:
        """
        Report every relevant variable with its declared and computed value.

        ``value`` prefers the element's own inline declaration, then the
        document root, then the computed value; ``computed_value`` prefers
        the computed value, then the root, then the inline declaration.
        Variables without any value are left out. Sorted by name.
        """
        root = self.styles.document_element
        variables: List[ElementCssVariable] = []

        for name in self.collect_variable_names(element):
            full_name = f"--{name}"
            computed = self.styles.get_property_value(element, full_name).strip()
            root_value = self.styles.get_property_value(root, full_name).strip()
            declared = self._inline_value(element, name)

            computed_value = computed or root_value or declared
            if not computed_value:
                continue
            variables.append(
                ElementCssVariable(
                    name=name,
                    value=declared or root_value or computed,
                    computed_value=computed_value,
                )
            )

        return sorted(variables, key=lambda var: var.name)

    def extract_scoped_variables(
        self, path: Sequence[HostElement], selected: HostElement
    ) -> List[ElementCssVariable]:
        """
        Variables in scope at ``selected`` along a selection path.

        ``path`` is innermost-first (clicked element, then its ancestors).
        Only the part of the path from the clicked element up to and including
        ``selected`` is inspected; the first occurrence of a name wins and only
        schema variables are kept.
        """
        index = next((i for i, element in enumerate(path) if element == selected), -1)
        elements = list(path[: index + 1]) if index >= 0 else [selected]

        scoped: Dict[str, ElementCssVariable] = {}
        for element in elements:
            for variable in self.extract_variables(element):
                if is_allowed_variable(variable.name) and variable.name not in scoped:
                    scoped[variable.name] = variable
        return list(scoped.values())

    def collect_root_variables(self) -> Dict[str, str]:
        """Prefixed variables declared by ``:root`` / ``html`` rules of readable sheets."""

        declared: Dict[str, str] = {}
        pattern = re.compile(
            rf"--({re.escape(self.settings.variable_prefix)}[a-zA-Z0-9-]*)\s*:\s*([^;}}]+)"
        )
        for rule in self._accessible_rules():
            selector = _WHITESPACE.sub(" ", rule.selector_text.strip())
            if selector not in _ROOT_SELECTORS:
                continue
            for name, value in pattern.findall(rule.css_text):
                if value.strip():
                    declared[name] = value.strip()
        return declared

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    @staticmethod
    def _is_body(element: HostElement) -> bool:
        return element.tag_name.lower() == "body"

    def element_path(self, element: HostElement) -> str:
        """Readable selector path from below ``<body>`` down to ``element``."""

        segments: List[str] = []
        current: Optional[HostElement] = element

        while current is not None and not self._is_body(current):
            selector = current.tag_name.lower()

            if current.element_id:
                segments.insert(0, f"{selector}#{current.element_id}")
                break

            classes = [
                cls
                for cls in current.class_names
                if cls and not cls.startswith(self.settings.framework_class_prefix)
            ][: self.settings.max_path_classes]
            if classes:
                selector += "." + ".".join(classes)

            parent = current.parent
            if parent is not None:
                siblings = [
                    child for child in parent.children if child.tag_name == current.tag_name
                ]
                if len(siblings) > 1:
                    position = next(
                        i for i, sibling in enumerate(siblings, start=1) if sibling == current
                    )
                    selector += f":nth-of-type({position})"

            segments.insert(0, selector)
            current = parent

        return " > ".join(segments)

    def selection_path(self, element: HostElement) -> List[HostElement]:
        """``element`` followed by up to ``max_ancestors`` ancestors below ``<body>``."""

        path = [element]
        current = element.parent
        while (
            current is not None
            and not self._is_body(current)
            and len(path) <= self.settings.max_ancestors
        ):
            path.append(current)
            current = current.parent
        return path

    def selection_path_label(self, path: Sequence[HostElement]) -> str:
        return " > ".join(
            self.element_path(element).split(" > ")[-1] for element in reversed(path)
        )

    # ------------------------------------------------------------------
    # Override rules
    # ------------------------------------------------------------------
    @staticmethod
    def _selector_targets(element: HostElement, selector: str) -> bool:
        try:
            if element.matches(selector):
                return True
        except InvalidSelectorError as exc:
            log.debug(f"Retrying override selector without pseudo-classes: {exc}")

        # Rules are often written for :hover/:focus states that a static
        # match never satisfies.
        stripped = strip_pseudo_classes(selector)
        if not stripped or stripped == selector:
            return False
        try:
            return element.matches(stripped)
        except InvalidSelectorError:
            return False

    def matching_override_rules(
        self, element: HostElement, document: Optional[str]
    ) -> List[OverrideRule]:
        """Override rules of ``document`` whose selector targets ``element``."""

        return [
            rule
            for rule in list_override_rules(document)
            if self._selector_targets(element, rule.selector)
        ]
