from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from .commands import (
    edit as cmd_edit,
    generate as cmd_generate,
    inspect_element as cmd_inspect,
    overrides as cmd_overrides,
    validate as cmd_validate,
)
from ..core.errors import SettingsError
from ..core.logger import get_logger

log = get_logger(__name__)


def entrypoint():
    sys.exit(main())


def _add_output_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--out",
        type=str,
        default=None,
        help="Write the result here instead of updating the theme file in place",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the resulting theme without writing any files",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trading front-end theme CSS tool")
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Engine settings JSON (or set OUI_THEME_SETTINGS)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Generate the canonical theme sheet")
    g.add_argument(
        "--theme", type=str, default=None, help="Existing theme to take values from"
    )
    g.add_argument(
        "--set",
        action="append",
        metavar="NAME=VALUE",
        help="Variable value to apply (repeatable), e.g. oui-rounded=6px",
    )
    _add_output_args(g)

    c = sub.add_parser("set-color", help="Set a colour variable from a hex value")
    c.add_argument("name", type=str, help="oui-color-* or gradient-* variable name")
    c.add_argument("hex", type=str, help="Colour as #rrggbb")
    c.add_argument("--theme", type=str, default=None, help="Theme file to edit")
    _add_output_args(c)

    v = sub.add_parser("set-value", help="Set any theme variable to a raw value")
    v.add_argument("name", type=str, help="Variable name, e.g. oui-font-size-base")
    v.add_argument("value", type=str)
    v.add_argument("--theme", type=str, default=None, help="Theme file to edit")
    _add_output_args(v)

    o = sub.add_parser("overrides", help="List or edit the AI override rules")
    o.add_argument("--theme", type=str, default=None, help="Theme file to edit")
    actions = o.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="List override rules")
    ou = actions.add_parser("upsert", help="Add or replace the rule for a selector")
    ou.add_argument("selector", type=str)
    ou.add_argument("properties", type=str, help="e.g. 'color: red; padding: 4px'")
    _add_output_args(ou)
    od = actions.add_parser("delete", help="Delete the rule for a selector")
    od.add_argument("selector", type=str)
    _add_output_args(od)
    oa = actions.add_parser("apply", help="Replace the whole override region")
    source = oa.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=str, default=None, help="File with override rules")
    source.add_argument("--text", type=str, default=None, help="Override rules as text")
    _add_output_args(oa)

    val = sub.add_parser("validate", help="Lint a theme file")
    val.add_argument("--theme", type=str, default=None, help="Theme file to check")
    val.add_argument(
        "--sanitize",
        action="store_true",
        help="Also strip dangerous constructs and write the result",
    )
    _add_output_args(val)

    i = sub.add_parser(
        "inspect", help="Show theme variables in effect on an element of an HTML page"
    )
    i.add_argument("page", type=str, help="HTML file")
    i.add_argument("--selector", type=str, required=True, help="CSS selector of the element")
    i.add_argument("--theme", type=str, default=None, help="Theme injected into the page")
    i.add_argument(
        "--scoped",
        action="store_true",
        help="Report variables in scope along the ancestor path instead of the subtree",
    )
    i.add_argument("--json", action="store_true", help="Print the result as JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "generate":
            return cmd_generate.run(args)
        elif args.command == "set-color":
            return cmd_edit.run_set_color(args)
        elif args.command == "set-value":
            return cmd_edit.run_set_value(args)
        elif args.command == "overrides":
            return cmd_overrides.run(args)
        elif args.command == "validate":
            return cmd_validate.run(args)
        elif args.command == "inspect":
            return cmd_inspect.run(args)
    except SettingsError as exc:
        log.error(f"{exc}")
        return 2
    return 1


if __name__ == "__main__":
    entrypoint()
