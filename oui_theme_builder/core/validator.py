"""
Theme document linting.

Checks a theme document before it is stored or injected into a page:
CSS syntax errors, script-capable constructs, colour channel format and the
presence of the variables the front-end cannot do without.
"""

from __future__ import annotations

import re
from typing import List

import tinycss2
from pydantic import BaseModel, Field

from .logger import get_logger

log = get_logger(__name__)

__all__ = [
    "ThemeValidationResult",
    "RECOMMENDED_VARIABLES",
    "validate_theme",
    "sanitize_theme",
]

RECOMMENDED_VARIABLES = (
    "--oui-color-primary",
    "--oui-color-base-1",
    "--oui-color-base-10",
    "--oui-color-base-foreground",
)

_DANGEROUS_PATTERNS = (
    (re.compile(r"@import", re.IGNORECASE), "@import declarations"),
    (re.compile(r"javascript:", re.IGNORECASE), "javascript: URLs"),
    (re.compile(r"expression\s*\(", re.IGNORECASE), "CSS expressions"),
    (re.compile(r"behavior\s*:", re.IGNORECASE), "behavior properties"),
    (re.compile(r"vbscript:", re.IGNORECASE), "vbscript: URLs"),
    (re.compile(r"data:.*script", re.IGNORECASE), "data URLs with scripts"),
)

_SANITIZERS = (
    re.compile(r"@import[^;]*;", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"vbscript\s*:", re.IGNORECASE),
    re.compile(r"expression\s*\([^)]*\)", re.IGNORECASE),
    re.compile(r"behavior\s*:[^;]*;", re.IGNORECASE),
    re.compile(r"data:[^;]*script[^;]*;", re.IGNORECASE),
)

_COLOR_VARIABLE = re.compile(r"--(oui-color-[^:]+):\s*([^;]+);")
_RGB_TRIPLE = re.compile(r"^\d{1,3}\s+\d{1,3}\s+\d{1,3}$")
_MAX_BRACES = 100


class ThemeValidationResult(BaseModel):
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.is_valid = False
        self.errors.append(message)


def _check_syntax(css: str, result: ThemeValidationResult) -> None:
    for node in tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True):
        if node.type == "error":
            result.add_error(
                f"Parse error: {node.message} (line {node.source_line}, column {node.source_column})"
            )
            continue
        if node.type != "qualified-rule":
            continue
        for decl in tinycss2.parse_declaration_list(
            node.content, skip_comments=True, skip_whitespace=True
        ):
            if decl.type == "error":
                result.add_error(
                    f"Parse error: {decl.message} (line {decl.source_line}, column {decl.source_column})"
                )


def _check_colors(css: str, result: ThemeValidationResult) -> None:
    for match in _COLOR_VARIABLE.finditer(css):
        name = match.group(1).strip()
        value = match.group(2).strip()
        if not _RGB_TRIPLE.match(value):
            result.warnings.append(
                f'Property {name} should use RGB format with space-separated values (e.g., "255 0 0")'
            )
            continue
        if any(int(channel) > 255 for channel in value.split()):
            result.add_error(
                f"Property {name} contains invalid RGB values. Values must be between 0 and 255."
            )


def validate_theme(css: str) -> ThemeValidationResult:
    """
    Lint a theme document.

    Errors make the result invalid (syntax errors, dangerous constructs,
    out-of-range colour channels); warnings flag likely mistakes (no
    ``:root``, missing recommended variables, non-triple colour values,
    unusually many rules). An empty document is valid.
    """
    result = ThemeValidationResult()
    if not css or not css.strip():
        return result

    _check_syntax(css, result)

    if ":root" not in css:
        result.warnings.append(
            "Theme CSS should contain a :root selector with CSS custom properties"
        )

    missing = [name for name in RECOMMENDED_VARIABLES if name not in css]
    if missing:
        result.warnings.append(
            f"Missing recommended theme properties: {', '.join(missing)}"
        )

    for pattern, label in _DANGEROUS_PATTERNS:
        if pattern.search(css):
            result.add_error(f"Potentially dangerous CSS detected: {label}")

    if css.count("{") > _MAX_BRACES:
        result.warnings.append(
            "CSS appears to be very complex. Consider simplifying for better performance."
        )

    _check_colors(css, result)

    log.debug(f"Validated theme: {len(result.errors)} errors, {len(result.warnings)} warnings")
    return result


def sanitize_theme(css: str) -> str:
    """Strip script-capable constructs (``@import``, ``javascript:``, ``expression()`` ...)."""

    if not css:
        return ""
    sanitized = css
    for pattern in _SANITIZERS:
        sanitized = pattern.sub("", sanitized)
    return sanitized.strip()
