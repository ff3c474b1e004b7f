"""Command line interface for running a phaseboot bootstrap."""
from __future__ import annotations

import argparse
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from phaseboot import BOOT_PATH, Bootstrapper, HandlerFailure, InvalidConfiguration, LoadFailure
from phaseboot.core.utils import package_version
from phaseboot.settings import load_options_file

logger = logging.getLogger(__name__)


def load_environment() -> None:
    candidates = []
    if env_file := os.getenv("ENV_FILE"):
        candidates.append(Path(env_file))
    candidates.append(Path(".env"))

    for path in candidates:
        if not path.exists():
            continue
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip().strip('"'))


def configure_logging() -> None:
    """Configure logging from an INI file or fall back to basic configuration."""

    config_candidates = []
    if config_env := os.getenv("LOGGING_CONFIG"):
        config_candidates.append(Path(config_env))
    config_candidates.append(Path("logging.ini"))

    for config_path in config_candidates:
        if not config_path.exists():
            continue
        if config_path.suffix.lower() not in {".ini", ".cfg"}:
            print(f"Skipping unsupported logging config {config_path}.")
            continue
        try:
            logging.config.fileConfig(config_path, disable_existing_loggers=False)
            return
        except (OSError, ValueError, KeyError) as exc:
            print(f"Failed to load logging config {config_path}: {exc}. Falling back to basic logging.")
            break

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _options(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if args.config:
        options.update(load_options_file(Path(args.config)))
    if args.app_root:
        options["appRootDir"] = args.app_root
    if args.env:
        options["env"] = args.env
    if args.timeout is not None:
        options["handlerTimeout"] = args.timeout
    return options


def _bootstrapper(args: argparse.Namespace) -> Bootstrapper:
    bootstrapper = Bootstrapper(_options(args))
    if args.add_phase:
        bootstrapper.add_phases(args.add_phase)
    return bootstrapper


def command_run(args: argparse.Namespace) -> int:
    bootstrapper = _bootstrapper(args)
    context: Dict[str, Any] = {}
    if args.phases:
        context["phases"] = list(args.phases)
    logger.info(
        "Running phases %s for %s (env=%s).",
        context.get("phases", bootstrapper.phases),
        bootstrapper.options.app_root_dir,
        bootstrapper.options.env,
    )
    try:
        bootstrapper.run(context).result()
    except HandlerFailure as exc:
        print(f"Error: {exc}")
        return 1
    return 0


def command_phases(args: argparse.Namespace) -> int:
    bootstrapper = _bootstrapper(args)
    print("Phases:")
    for phase in bootstrapper.phases:
        print(f"- {phase}")
    return 0


def command_plugins(args: argparse.Namespace) -> int:
    bootstrapper = _bootstrapper(args)
    print("Registered plugins:")
    for plugin in bootstrapper.get_extensions(BOOT_PATH):
        implemented = [phase for phase in bootstrapper.phases if plugin.implements(phase)]
        print(f"- {plugin.path}: {', '.join(implemented) or '(no phases)'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run application bootstrap plugins phase by phase.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {package_version()}")
    parser.add_argument("--config", help="YAML file with bootstrapper options.")
    parser.add_argument("--app-root", help="Application root directory.")
    parser.add_argument("--env", help="Environment name (defaults to PHASEBOOT_ENV).")
    parser.add_argument("--timeout", type=float, help="Per-handler timeout in seconds.")
    parser.add_argument(
        "--add-phase",
        action="append",
        default=[],
        help="Phase name to merge into the phase list; repeat to keep an order.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_run = subparsers.add_parser("run", help="Run every phase")
    parser_run.add_argument(
        "phases",
        nargs="*",
        help="Optional ordered list of phases to run instead of the configured ones.",
    )
    parser_run.set_defaults(func=command_run)

    parser_phases = subparsers.add_parser("phases", help="List phases in execution order")
    parser_phases.set_defaults(func=command_phases)

    parser_plugins = subparsers.add_parser("plugins", help="List plugins and the phases they implement")
    parser_plugins.set_defaults(func=command_plugins)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (InvalidConfiguration, LoadFailure, FileNotFoundError) as exc:
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())
