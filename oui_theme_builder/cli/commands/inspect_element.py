from __future__ import annotations

import json
from argparse import Namespace
from dataclasses import asdict
from pathlib import Path

from ...core.errors import InvalidSelectorError
from ...core.logger import get_logger
from ...core.scope_resolver import ElementScopeResolver
from ...core.static_dom import StaticDocument
from .common import read_theme, resolve_theme_path, settings_from_args

log = get_logger(__name__)


def run(args: Namespace) -> int:
    """Show the theme variables and AI overrides in effect on one element of a page."""

    page = Path(args.page)
    if not page.exists():
        log.error(f"Page not found: {page}")
        return 1

    settings = settings_from_args(args)
    theme = read_theme(resolve_theme_path(args, settings))
    document = StaticDocument.from_html(
        page.read_text(encoding="utf-8"), extra_css=[theme] if theme else []
    )

    try:
        element = document.select_one(args.selector)
    except InvalidSelectorError as exc:
        log.error(f"{exc}")
        return 1
    if element is None:
        log.error(f"No element matches '{args.selector}'")
        return 1

    resolver = ElementScopeResolver(document, document, settings)
    if args.scoped:
        path = resolver.selection_path(element)
        variables = resolver.extract_scoped_variables(path, path[-1])
        label = resolver.selection_path_label(path)
    else:
        variables = resolver.extract_variables(element)
        label = resolver.element_path(element)
    overrides = resolver.matching_override_rules(element, theme)

    if args.json:
        print(
            json.dumps(
                {
                    "path": label,
                    "variables": [asdict(var) for var in variables],
                    "overrides": [
                        {"selector": rule.selector, "properties": rule.properties}
                        for rule in overrides
                    ],
                },
                indent=2,
            )
        )
        return 0

    log.info(f"Element: {label}")
    log.info(f"Variables ({len(variables)}):")
    for var in variables:
        if var.value == var.computed_value:
            log.info(f"  --{var.name}: {var.value}")
        else:
            log.info(f"  --{var.name}: {var.value} (computed: {var.computed_value})")
    if overrides:
        log.info("AI overrides targeting this element:")
        for rule in overrides:
            log.info(f"  {rule.css_text}")
    return 0
