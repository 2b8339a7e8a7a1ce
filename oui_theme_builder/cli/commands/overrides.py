from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from ...core.editor import ThemeEditorSession
from ...core.logger import get_logger
from .common import read_theme, resolve_theme_path, settings_from_args, write_theme

log = get_logger(__name__)


def _list(session: ThemeEditorSession, args: Namespace) -> int:
    rules = session.override_rules
    if not rules:
        log.info("No AI overrides")
        return 0
    log.info(f"AI overrides ({len(rules)}):")
    for rule in rules:
        log.info(f"  {rule.css_text}")
    return 0


def _upsert(session: ThemeEditorSession, args: Namespace) -> int:
    session.upsert_override(args.selector, args.properties)
    return 0


def _delete(session: ThemeEditorSession, args: Namespace) -> int:
    selector = args.selector.strip()
    rule = next((r for r in session.override_rules if r.selector == selector), None)
    if rule is None:
        log.warning(f"No override rule for selector '{selector}'")
        return 1
    session.delete_override(rule)
    return 0


def _apply(session: ThemeEditorSession, args: Namespace) -> int:
    if args.file:
        path = Path(args.file)
        if not path.exists():
            log.error(f"Override file not found: {path}")
            return 1
        text = path.read_text(encoding="utf-8")
    else:
        text = args.text or ""
    session.apply_overrides(text)
    return 0


_ACTIONS = {
    "list": _list,
    "upsert": _upsert,
    "delete": _delete,
    "apply": _apply,
}


def run(args: Namespace) -> int:
    settings = settings_from_args(args)
    source = resolve_theme_path(args, settings)
    if source is None or not source.exists():
        log.error(f"Theme file not found: {source}")
        return 1

    session = ThemeEditorSession(read_theme(source))
    code = _ACTIONS[args.action](session, args)
    if code == 0 and args.action != "list":
        write_theme(session.css, args, source)
    return code
