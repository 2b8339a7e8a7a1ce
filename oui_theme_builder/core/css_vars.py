from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .logger import get_logger
from .theme_schema import iter_families, schema_defaults

log = get_logger(__name__)

__all__ = [
    "FontValues",
    "parse_css_variables",
    "generate_theme_css",
    "extract_font_values",
]

# Best-effort scan: anything shaped like `--name: value;` anywhere in the text,
# including inside the override region.
_VARIABLE_PATTERN = re.compile(r"--([^:]+):\s*([^;]+);")

_FAMILY_COMMENTS = {
    "color": "colors",
    "gradient": "gradients",
    "rounded": "rounded",
    "spacing": "spacing",
}


@dataclass(frozen=True)
class FontValues:
    font_family: str
    font_size: str


def parse_css_variables(css: Optional[str]) -> Dict[str, str]:
    """
    Parse every ``--name: value;`` declaration in ``css``.

    Returns a mapping of variable names (without the ``--`` prefix) to their
    trimmed raw values. Fragments that do not fit the pattern are ignored, so
    ``None``, ``""`` or garbage simply yield an empty mapping.
    """
    if not css:
        return {}

    variables: Dict[str, str] = {}
    for match in _VARIABLE_PATTERN.finditer(css):
        variables[match.group(1).strip()] = match.group(2).strip()
    log.debug(f"Parsed {len(variables)} CSS variables")
    return variables


def _value_or_default(variables: Mapping[str, str], name: str, defaults: Mapping[str, str]) -> str:
    value = variables.get(name)
    return value if value else defaults[name]


def generate_theme_css(variables: Mapping[str, str]) -> str:
    """
    Render the canonical theme sheet for ``variables``.

    The ``:root`` block always covers the whole schema; entries missing from
    ``variables`` (or set to an empty string) use their defaults. Names outside
    the schema are not emitted, and neither is any override region.
    """
    defaults = schema_defaults()
    lines: List[str] = [":root {"]

    for index, (family, entries) in enumerate(iter_families()):
        if index:
            lines.append("")
        comment = _FAMILY_COMMENTS.get(family)
        if comment:
            lines.append(f"  /* {comment} */")
        for entry in entries:
            value = _value_or_default(variables, entry.name, defaults)
            lines.append(f"  {entry.css_name}: {value};")

    lines.append("}")
    lines.append("")

    font_family = _value_or_default(variables, "oui-font-family", defaults)
    font_size = _value_or_default(variables, "oui-font-size-base", defaults)
    lines.append("html, body {")
    lines.append(f"  font-family: {font_family} !important;")
    lines.append(f"  font-size: {font_size} !important;")
    lines.append("}")
    return "\n".join(lines)


def extract_font_values(css: Optional[str]) -> FontValues:
    variables = parse_css_variables(css)
    defaults = schema_defaults()
    return FontValues(
        font_family=_value_or_default(variables, "oui-font-family", defaults),
        font_size=_value_or_default(variables, "oui-font-size-base", defaults),
    )
