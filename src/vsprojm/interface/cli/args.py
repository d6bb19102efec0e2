from __future__ import annotations

"""
CLI Argument Definition.

Defines the sub-command schema (names, aliases, flags and help texts) of
the vsprojm command line.
"""

import argparse
from typing import Optional

from vsprojm.domain.constants import APP_NAME, APP_VERSION, DEFAULT_EXTENSION
from vsprojm.utils.i18n import i18n

# Canonical command name for every accepted alias
COMMAND_ALIASES = {
    "a": "add",
    "del": "delete",
    "v": "view",
    "ren": "rename",
    "incdir": "add-incdir",
    "libdir": "add-libdir",
    "lib": "add-lib",
}

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser.

    Options left unset stay None so the configured defaults can fill them.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(prog=APP_NAME, description=i18n.t("app.description"))
    p.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    # --- Diagnostics and Configuration ---
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))
    p.add_argument("--log-file", dest="log_file", default=None, help=i18n.t("cli.args.log_file"))
    p.add_argument("--config", dest="config_path", default=None, help=i18n.t("cli.args.config"))

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- add ---
    add = sub.add_parser("add", aliases=["a"], help=i18n.t("cli.args.cmd_add"))
    add.add_argument(
        "-e", "--extension",
        default=None,
        help=i18n.t("cli.args.extension", default=DEFAULT_EXTENSION),
    )
    _add_project_arg(add)
    add.add_argument("-d", "--directory", default=None, help=i18n.t("cli.args.directory"))
    add.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        default=None,
        help=i18n.t("cli.args.no_recursive"),
    )
    _add_refinement_args(add)
    _add_dryrun_arg(add)

    # --- delete ---
    delete = sub.add_parser("delete", aliases=["del"], help=i18n.t("cli.args.cmd_delete"))
    _add_project_arg(delete)
    delete.add_argument("-t", "--target", default=None, help=i18n.t("cli.args.target"))
    delete.add_argument("-e", "--extension", default=None, help=i18n.t("cli.args.delete_extension"))
    _add_yes_arg(delete)
    _add_refinement_args(delete)
    _add_dryrun_arg(delete)

    # --- view ---
    view = sub.add_parser("view", aliases=["v"], help=i18n.t("cli.args.cmd_view"))
    _add_project_arg(view)
    view.add_argument("-f", "--files-only", action="store_true", help=i18n.t("cli.args.files_only"))
    view.add_argument("-l", "--level", type=_non_negative_int, default=None, help=i18n.t("cli.args.level"))

    # --- rename ---
    rename = sub.add_parser("rename", aliases=["ren"], help=i18n.t("cli.args.cmd_rename"))
    _add_project_arg(rename)
    rename.add_argument("-f", "--from", dest="source", required=True, help=i18n.t("cli.args.rename_from"))
    rename.add_argument("-t", "--to", dest="target", required=True, help=i18n.t("cli.args.rename_to"))
    _add_yes_arg(rename)
    _add_dryrun_arg(rename)

    # --- configuration properties ---
    incdir = sub.add_parser("add-incdir", aliases=["incdir"], help=i18n.t("cli.args.cmd_incdir"))
    _add_project_arg(incdir)
    incdir.add_argument("--path", dest="value", required=True, help=i18n.t("cli.args.incdir"))
    _add_dryrun_arg(incdir)

    libdir = sub.add_parser("add-libdir", aliases=["libdir"], help=i18n.t("cli.args.cmd_libdir"))
    _add_project_arg(libdir)
    libdir.add_argument("--path", dest="value", required=True, help=i18n.t("cli.args.libdir"))
    _add_dryrun_arg(libdir)

    lib = sub.add_parser("add-lib", aliases=["lib"], help=i18n.t("cli.args.cmd_lib"))
    _add_project_arg(lib)
    lib.add_argument("-n", "--name", dest="value", required=True, help=i18n.t("cli.args.lib"))
    _add_dryrun_arg(lib)

    return p


def canonical_command(name: Optional[str]) -> Optional[str]:
    """Map an alias ('del') to its command name ('delete')."""
    if name is None:
        return None
    return COMMAND_ALIASES.get(name, name)

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _add_project_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--project", required=True, help=i18n.t("cli.args.project"))


def _add_refinement_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-x", "--regex", default=None, help=i18n.t("cli.args.regex"))
    parser.add_argument("-n", "--not", dest="negate", action="store_true", help=i18n.t("cli.args.negate"))


def _add_dryrun_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dryrun", "--dry-run", dest="dryrun", action="store_true", help=i18n.t("cli.args.dryrun"))


def _add_yes_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-y", "--yes", action="store_true", help=i18n.t("cli.args.yes"))


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"depth must be >= 0, got {number}")
    return number
