from __future__ import annotations

import re
from argparse import Namespace

from ...core.editor import ThemeEditorSession
from ...core.logger import get_logger
from .common import read_theme, resolve_theme_path, settings_from_args, write_theme

log = get_logger(__name__)

_HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")


def run_set_color(args: Namespace) -> int:
    if not _HEX_COLOR.match(args.hex):
        log.error(f"Invalid colour '{args.hex}': expected a 6-digit hex value")
        return 1

    settings = settings_from_args(args)
    source = resolve_theme_path(args, settings)
    session = ThemeEditorSession(read_theme(source))
    before = session.css
    css = session.update_color(args.name, args.hex)
    if css == before:
        log.warning(f"{args.name} is not a colour variable; theme unchanged")
    write_theme(css, args, source)
    return 0


def run_set_value(args: Namespace) -> int:
    settings = settings_from_args(args)
    source = resolve_theme_path(args, settings)
    session = ThemeEditorSession(read_theme(source))
    css = session.update_value(args.name.lstrip("-"), args.value)
    write_theme(css, args, source)
    return 0
