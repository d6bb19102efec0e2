from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates one CLI invocation: parses arguments, resolves the user
configuration, starts logging, dispatches the sub-command to the project
service and maps failures to exit codes. User-facing output goes to stdout;
diagnostics go through logging to stderr.
"""

import os
import sys
from typing import Any, Callable, Dict, List, Optional

from vsprojm.core.services.project_service import (
    ProjectSession,
    add_configuration_property,
    add_files,
    commit_delete,
    commit_merge,
    commit_rename,
    open_project,
    preview_delete,
    preview_rename,
    render_project_view,
)
from vsprojm.core.services.validator import validate_config
from vsprojm.domain.config import load_config
from vsprojm.domain.constants import PROPERTY_COMMANDS, PROPERTY_NAMES
from vsprojm.domain.errors import InconsistentCommitError, InvalidInputError, VsprojmError
from vsprojm.domain.project_models import DeletePlan
from vsprojm.infra.fs import normalize_path
from vsprojm.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    shutdown_logging,
)
from vsprojm.interface.cli import args as cli_args
from vsprojm.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INCONSISTENT = 3
EXIT_INTERRUPTED = 130

InputFunc = Callable[[str], str]

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, *, input_func: InputFunc = input) -> int:
    """
    Execute one CLI command.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
        input_func: Prompt reader used for confirmations.

    Returns:
        int: 0 on success, nothing matched or a declined prompt; 1 on an
        operation error; 2 on invalid input; 3 when only the project file
        could be written; 130 on interrupt.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    cfg, warnings = validate_config(load_config(args.config_path), strict=False)

    log_level = "DEBUG" if args.debug else cfg["log_level"]
    log_file = args.log_file or cfg["log_file"] or None
    if log_file:
        log_file = normalize_path(log_file, get_default_log_path())
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=log_file), force=True)

    for w in warnings:
        logger.warning(f"Configuration: {w}")

    command = cli_args.canonical_command(args.command)
    handler = _COMMANDS[command]
    logger.debug(f"Running '{command}' on {args.project}")

    try:
        return handler(args, cfg, input_func)
    except KeyboardInterrupt:
        print(i18n.t("cli.status.interrupted"), file=sys.stderr)
        return EXIT_INTERRUPTED
    except InconsistentCommitError as e:
        logger.error(str(e))
        print(i18n.t("cli.errors.inconsistent", error=e), file=sys.stderr)
        return EXIT_INCONSISTENT
    except InvalidInputError as e:
        print(i18n.t("cli.errors.prefix", error=e), file=sys.stderr)
        return EXIT_USAGE
    except VsprojmError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(i18n.t("cli.errors.prefix", error=e), file=sys.stderr)
        return EXIT_ERROR
    finally:
        shutdown_logging()

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _run_add(args: Any, cfg: Dict[str, Any], input_func: InputFunc) -> int:
    session = _open(args, cfg)
    extension = (args.extension or cfg["default_extension"]).lstrip(".")
    recursive = cfg["recursive"] if args.recursive is None else args.recursive
    scan_dir = args.directory or os.path.dirname(os.path.abspath(args.project))

    print(i18n.t("cli.add.scanning", path=scan_dir))
    if args.regex:
        key = "cli.add.looking_not_regex" if args.negate else "cli.add.looking_regex"
        print(i18n.t(key, ext=extension, pattern=args.regex))
    else:
        print(i18n.t("cli.add.looking", ext=extension))

    plan = add_files(
        session, extension,
        scan_dir=scan_dir, recursive=recursive,
        pattern=args.regex, negate=args.negate, dry_run=args.dryrun,
    )
    if plan.is_empty:
        print(i18n.t("cli.add.none_found", ext=extension, path=scan_dir))
        return EXIT_OK

    print(i18n.t("cli.add.found", count=len(plan.candidates)))
    for candidate in plan.candidates:
        print(f"  - {candidate.project_path}")

    if not plan.project_files:
        print(i18n.t("cli.add.no_source"))
        return EXIT_OK

    if plan.created_nodes:
        print(i18n.t("cli.add.filters_new", names=", ".join(plan.created_nodes)))

    if args.dryrun:
        print()
        print(i18n.t("cli.status.dryrun"))
        print(i18n.t("cli.add.dry_done", count=len(plan.project_files), path=args.project))
        return EXIT_OK

    if plan.filters_created:
        print(i18n.t("cli.add.filters_created", path=session.filters_path))
    print(i18n.t("cli.add.done", count=len(plan.project_files), path=args.project))
    return EXIT_OK


def _run_delete(args: Any, cfg: Dict[str, Any], input_func: InputFunc) -> int:
    session = _open(args, cfg)
    plan = preview_delete(session, args.target, args.extension, args.regex, args.negate)
    if plan.is_empty:
        print(i18n.t("cli.delete.nothing"))
        return EXIT_OK

    _print_delete_plan(plan)

    if args.dryrun:
        print()
        print(i18n.t("cli.status.dryrun"))
        print(i18n.t("cli.delete.dry_done", files=len(_plan_files(plan)), nodes=len(plan.nodes)))
        return EXIT_OK

    if not _confirmed(args, cfg, input_func, i18n.t("cli.delete.confirm")):
        print(i18n.t("cli.status.cancelled"))
        return EXIT_OK

    result = commit_delete(session, args.target, args.extension, args.regex, args.negate)
    print(i18n.t("cli.delete.done", files=len(_plan_files(result)), nodes=len(result.nodes)))
    return EXIT_OK


def _run_view(args: Any, cfg: Dict[str, Any], input_func: InputFunc) -> int:
    session = _open(args, cfg)
    lines, hierarchy = render_project_view(session, files_only=args.files_only, max_depth=args.level)
    for line in lines:
        print(line)
    print()
    print(i18n.t("cli.view.summary", files=hierarchy.file_count, filters=hierarchy.node_count))
    return EXIT_OK


def _run_rename(args: Any, cfg: Dict[str, Any], input_func: InputFunc) -> int:
    session = _open(args, cfg)
    source, target = args.source, args.target
    plan = preview_rename(session, source, target)

    if plan.target_exists:
        print(i18n.t("cli.rename.target_exists", target=target))
        prompt = i18n.t("cli.rename.merge_confirm", source=source, target=target, count=len(plan.files))
        if args.dryrun:
            print(i18n.t("cli.rename.merge_preview", source=source, target=target, count=len(plan.files)))
            print(i18n.t("cli.rename.dry_done"))
            return EXIT_OK
        if not _confirmed(args, cfg, input_func, prompt):
            print(i18n.t("cli.status.cancelled"))
            return EXIT_OK
        result = commit_merge(session, source, target)
        print(i18n.t("cli.rename.merged", count=len(result.files), source=source, target=target))
        return EXIT_OK

    print(i18n.t("cli.rename.preview", source=source, target=target, count=len(plan.files)))
    if args.dryrun:
        print(i18n.t("cli.rename.dry_done"))
        return EXIT_OK
    if not _confirmed(args, cfg, input_func, i18n.t("cli.rename.confirm")):
        print(i18n.t("cli.status.cancelled"))
        return EXIT_OK

    commit_rename(session, source, target)
    print(i18n.t("cli.rename.done", source=source, target=target))
    return EXIT_OK


def _run_property(args: Any, cfg: Dict[str, Any], input_func: InputFunc) -> int:
    session = _open(args, cfg)
    section, prop = PROPERTY_COMMANDS[cli_args.canonical_command(args.command)]
    update = add_configuration_property(session, section, prop, args.value, dry_run=args.dryrun)

    if not update.configurations:
        print(i18n.t("cli.property.none"))
        return EXIT_OK

    key = "cli.property.dry_done" if args.dryrun else "cli.property.done"
    print(i18n.t(key, value=args.value, prop=PROPERTY_NAMES[prop], count=len(update.configurations)))
    for condition in update.configurations:
        print(f"  - {condition}")
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[Any, Dict[str, Any], InputFunc], int]] = {
    "add": _run_add,
    "delete": _run_delete,
    "view": _run_view,
    "rename": _run_rename,
    "add-incdir": _run_property,
    "add-libdir": _run_property,
    "add-lib": _run_property,
}

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _open(args: Any, cfg: Dict[str, Any]) -> ProjectSession:
    return open_project(args.project, source_extensions=cfg["source_extensions"])


def _confirmed(args: Any, cfg: Dict[str, Any], input_func: InputFunc, prompt: str) -> bool:
    """Ask for a y/N confirmation unless --yes or assume_yes is set."""
    if getattr(args, "yes", False) or cfg["assume_yes"]:
        return True
    try:
        answer = input_func(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _plan_files(plan: DeletePlan) -> List[str]:
    """Files removed from either document, project file order first."""
    seen = dict.fromkeys(plan.files)
    for path in plan.filter_files:
        seen.setdefault(path, None)
    return list(seen)


def _print_delete_plan(plan: DeletePlan) -> None:
    files = _plan_files(plan)
    if files:
        print(i18n.t("cli.delete.files", count=len(files)))
        for path in files:
            print(f"  - {path}")
    if plan.nodes:
        print(i18n.t("cli.delete.nodes", count=len(plan.nodes)))
        for name in plan.nodes:
            print(f"  - {name}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
