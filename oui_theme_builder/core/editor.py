from __future__ import annotations

from typing import Dict, List, Optional

from .color_codec import hex_to_rgb_triple
from .css_vars import generate_theme_css, parse_css_variables
from .logger import get_logger
from .overrides import (
    OverrideRule,
    compose_document,
    delete_override_rule,
    extract_overrides,
    replace_overrides,
    upsert_override_rule,
)

log = get_logger(__name__)

__all__ = ["ThemeEditorSession"]


class ThemeEditorSession:
    """
    Holds the theme document being edited and funnels every change through
    the variable store.

    Variable edits regenerate the canonical block and re-append the override
    region untouched, so colour and value tweaks never disturb AI overrides.
    """

    def __init__(self, initial_css: Optional[str] = None, default_css: Optional[str] = None) -> None:
        self._default_css = default_css if default_css is not None else generate_theme_css({})
        self._css: Optional[str] = initial_css

    @property
    def css(self) -> str:
        return self._css if self._css else self._default_css

    @property
    def variables(self) -> Dict[str, str]:
        return parse_css_variables(extract_overrides(self.css).base)

    @property
    def override_rules(self) -> List[OverrideRule]:
        return extract_overrides(self.css).rules

    def _write_variable(self, name: str, value: str) -> str:
        extraction = extract_overrides(self.css)
        variables = parse_css_variables(extraction.base)
        variables[name] = value
        self._css = compose_document(generate_theme_css(variables), extraction.region)
        return self._css

    def update_color(self, name: str, hex_color: str) -> str:
        """
        Set a colour variable from a ``#rrggbb`` picker value.

        ``oui-color-*`` names are written as given; gradient pickers pass the
        bare ``gradient-*`` name, which is written under ``oui-gradient-*``.
        Any other name leaves the document unchanged.
        """
        rgb = hex_to_rgb_triple(hex_color)
        if name.startswith("oui-color"):
            return self._write_variable(name, rgb)
        if name.startswith("gradient"):
            return self._write_variable(f"oui-{name}", rgb)
        log.debug(f"Ignoring colour update for non-colour variable {name}")
        return self.css

    def update_value(self, name: str, value: str) -> str:
        return self._write_variable(name, value)

    def reset(self, css: Optional[str]) -> str:
        self._css = css
        return self.css

    def apply_overrides(self, overrides_text: Optional[str]) -> str:
        self._css = replace_overrides(self.css, overrides_text)
        return self._css

    def upsert_override(self, selector: str, properties: str) -> str:
        self._css = upsert_override_rule(self.css, selector, properties)
        return self._css

    def delete_override(self, rule: OverrideRule) -> str:
        self._css = delete_override_rule(self.css, rule)
        return self._css
