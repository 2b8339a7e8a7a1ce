from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Optional

from ...core.logger import get_logger
from ...core.settings import EngineSettings, load_settings

log = get_logger(__name__)


def settings_from_args(args: Namespace) -> EngineSettings:
    settings_path = getattr(args, "settings", None)
    return load_settings(Path(settings_path) if settings_path else None)


def resolve_theme_path(args: Namespace, settings: EngineSettings) -> Optional[Path]:
    theme = getattr(args, "theme", None) or settings.default_theme_path
    return Path(theme) if theme else None


def read_theme(path: Optional[Path]) -> Optional[str]:
    """Theme text at ``path``; ``None`` when no path is given or the file does not exist yet."""

    if path is None or not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def write_theme(css: str, args: Namespace, source: Optional[Path]) -> None:
    out = Path(args.out) if getattr(args, "out", None) else source
    if getattr(args, "dry_run", False):
        log.info(f"[DRY-RUN] Resulting theme:\n{css}")
        return
    if out is None:
        print(css)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(css + "\n", encoding="utf-8")
    log.info(f"Wrote theme to {out}")
