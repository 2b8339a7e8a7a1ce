from __future__ import annotations

from argparse import Namespace

from ...core.logger import get_logger
from ...core.validator import sanitize_theme, validate_theme
from .common import read_theme, resolve_theme_path, settings_from_args, write_theme

log = get_logger(__name__)


def run(args: Namespace) -> int:
    settings = settings_from_args(args)
    source = resolve_theme_path(args, settings)
    css = read_theme(source)
    if css is None:
        log.error(f"Theme file not found: {source}")
        return 1

    result = validate_theme(css)
    for error in result.errors:
        log.error(f"ERROR: {error}")
    for warning in result.warnings:
        log.warning(f"WARNING: {warning}")

    if args.sanitize:
        write_theme(sanitize_theme(css), args, source)

    if result.is_valid:
        log.info(f"Theme is valid ({len(result.warnings)} warnings)")
        return 0
    log.info(f"Theme is invalid ({len(result.errors)} errors)")
    return 1
