from __future__ import annotations

from argparse import Namespace

from ...core.css_vars import generate_theme_css, parse_css_variables
from ...core.logger import get_logger
from ...core.overrides import compose_document, extract_overrides
from .common import read_theme, resolve_theme_path, settings_from_args, write_theme

log = get_logger(__name__)


def run(args: Namespace) -> int:
    """Regenerate the canonical theme block, keeping any override region."""

    settings = settings_from_args(args)
    source = resolve_theme_path(args, settings)
    extraction = extract_overrides(read_theme(source))
    variables = parse_css_variables(extraction.base)

    for assignment in args.set or []:
        name, sep, value = assignment.partition("=")
        if not sep or not name.strip():
            log.error(f"Expected NAME=VALUE, got '{assignment}'")
            return 1
        variables[name.strip().lstrip("-")] = value.strip()

    css = compose_document(generate_theme_css(variables), extraction.region)
    # Without --out a fresh theme goes to stdout rather than over the input.
    write_theme(css, args, None)
    return 0
