"""
AI override region handling.

A theme document may end with a region of free-form rules introduced by the
``/* AI Fine-Tune Overrides */`` comment. The canonical ``:root`` block before
it is regenerated freely by the variable store; the region after it is kept
as authored text and edited here one rule at a time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .logger import get_logger

log = get_logger(__name__)

__all__ = [
    "OVERRIDE_MARKER",
    "OverrideRule",
    "OverrideExtraction",
    "extract_overrides",
    "parse_override_rules",
    "list_override_rules",
    "compose_document",
    "upsert_override_rule",
    "delete_override_rule",
    "replace_overrides",
]

OVERRIDE_MARKER = "/* AI Fine-Tune Overrides */"

_MARKER_PATTERN = r"/\*\s*AI Fine-Tune Overrides\s*\*/"
# Region runs to the next marker (non-greedy) or the end of the document.
_REGION_PATTERN = re.compile(
    rf"{_MARKER_PATTERN}\s*(?P<region>.*?)(?={_MARKER_PATTERN}|\Z)", re.DOTALL
)
_RULE_PATTERN = re.compile(r"(?P<selector>[^{}]+?)\s*\{(?P<properties>[^{}]*)\}")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class OverrideRule:
    selector: str
    properties: str
    raw: str = ""

    @property
    def css_text(self) -> str:
        return f"{self.selector} {{ {self.properties} }}"


@dataclass(frozen=True)
class OverrideExtraction:
    base: str
    region: str

    @property
    def has_region(self) -> bool:
        return bool(self.region)

    @property
    def rules(self) -> List[OverrideRule]:
        return parse_override_rules(self.region)


def _normalise_properties(properties: str) -> str:
    return properties.strip().rstrip(";").strip()


def extract_overrides(document: Optional[str]) -> OverrideExtraction:
    """Split ``document`` into its canonical part and the override region text."""

    if not document:
        return OverrideExtraction(base="", region="")

    match = _REGION_PATTERN.search(document)
    if match is None:
        return OverrideExtraction(base=document.strip(), region="")

    base = document[: match.start()] + document[match.end() :]
    base = _EXCESS_NEWLINES.sub("\n\n", base).strip()
    return OverrideExtraction(base=base, region=match.group("region").strip())


def parse_override_rules(region: Optional[str]) -> List[OverrideRule]:
    if not region:
        return []

    rules: List[OverrideRule] = []
    for match in _RULE_PATTERN.finditer(region):
        selector = match.group("selector").strip()
        if not selector:
            continue
        rules.append(
            OverrideRule(
                selector=selector,
                properties=_normalise_properties(match.group("properties")),
                raw=match.group(0).strip(),
            )
        )
    return rules


def list_override_rules(document: Optional[str]) -> List[OverrideRule]:
    return extract_overrides(document).rules


def compose_document(base: str, overrides_text: str) -> str:
    """Append ``overrides_text`` under the marker; no marker when it is empty."""

    base = base.strip()
    overrides_text = overrides_text.strip()
    if not overrides_text:
        return base
    if not base:
        return f"{OVERRIDE_MARKER}\n{overrides_text}"
    return f"{base}\n\n{OVERRIDE_MARKER}\n{overrides_text}"


def _render_rules(rules: List[OverrideRule]) -> str:
    return "\n".join(rule.css_text for rule in rules)


def upsert_override_rule(document: Optional[str], selector: str, properties: str) -> str:
    """
    Insert or replace the rule for ``selector`` in the override region.

    Selectors are compared as trimmed strings: a rule whose selector text is
    identical is updated in place, anything else is appended at the end.
    """
    extraction = extract_overrides(document)
    rules = extraction.rules
    selector = selector.strip()
    new_rule = OverrideRule(selector=selector, properties=_normalise_properties(properties))

    for index, rule in enumerate(rules):
        if rule.selector == selector:
            rules[index] = new_rule
            log.debug(f"Replaced override rule for {selector}")
            break
    else:
        rules.append(new_rule)
        log.debug(f"Appended override rule for {selector}")

    return compose_document(extraction.base, _render_rules(rules))


def _literal_pattern(text: str) -> "re.Pattern[str]":
    # Escape each token, then let any whitespace run match any other.
    tokens = [re.escape(token) for token in text.split()]
    return re.compile(r"\s*".join(tokens))


def delete_override_rule(document: Optional[str], rule: OverrideRule) -> str:
    """
    Remove the first occurrence of ``rule`` from the override region.

    Matching uses the rule's original text (``raw``) when available so a rule
    read back from the document is removed exactly as it was written. When
    the region ends up empty the marker is dropped as well.
    """
    extraction = extract_overrides(document)
    source = rule.raw or rule.css_text
    if not source.strip():
        return compose_document(extraction.base, extraction.region)

    region, removed = _literal_pattern(source).subn("", extraction.region, count=1)
    if not removed:
        log.debug(f"Override rule not found for deletion: {rule.selector}")

    region = _EXCESS_NEWLINES.sub("\n\n", region).strip()
    if not parse_override_rules(region):
        return extraction.base
    return compose_document(extraction.base, region)


def replace_overrides(document: Optional[str], overrides_text: Optional[str]) -> str:
    """Swap the whole override region for ``overrides_text`` (empty removes it)."""

    extraction = extract_overrides(document)
    return compose_document(extraction.base, overrides_text or "")
