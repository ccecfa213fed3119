"""
Command-line interface for cargolaunch.

Two subcommands mirror the two top-level operations:

    cargolaunch program [--name N] [--kind K] -- build --bin foo
        Build with cargo, stream compiler output to stderr and print the
        path of the program to debug.

    cargolaunch configs [--directory DIR]
        Print the launch configurations for the project as JSON.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import get_config, set_config_path
from ..errors import CargoLaunchError
from ..models.artifacts import ArtifactFilter, CargoLaunchRequest
from ..orchestration import Cargo
from ..system import CancellationToken, check_executable_installed
from ..validation import ValidationError, handle_cli_error, validate_directory

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    # stdout carries command results, so logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def split_cargo_args(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split argv at the first ``--`` into (our arguments, cargo arguments)."""
    if "--" in argv:
        pos = argv.index("--")
        return argv[:pos], argv[pos + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargolaunch",
        description="Resolve cargo build artifacts and launch configurations for debugging.",
    )
    parser.add_argument("--config", type=Path, help="Path to a config.toml file.")
    parser.add_argument(
        "--project-root",
        type=str,
        default=".",
        help="Cargo project root (default: current directory).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    program = subparsers.add_parser(
        "program",
        help="Build with cargo and print the program to debug. Cargo arguments follow '--'.",
    )
    program.add_argument("--name", help="Only accept artifacts of this target name.")
    program.add_argument("--kind", help="Only accept artifacts of this target kind.")
    program.add_argument("--cwd", help="Working directory for cargo (default: project root).")

    configs = subparsers.add_parser("configs", help="Print launch configurations as JSON.")
    configs.add_argument("--directory", help="Cargo project directory overriding the project root.")

    return parser


async def _run_with_cancellation(coro_factory, cancellation: CancellationToken):
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancellation.cancel)
        installed = True
    except (NotImplementedError, RuntimeError):
        installed = False
    try:
        return await coro_factory()
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


def _write_diagnostic(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: On invalid input or when the operation fails.
    """
    own_args, cargo_args = split_cargo_args(list(sys.argv[1:] if argv is None else argv))
    args = build_parser().parse_args(own_args)

    try:
        if args.config:
            set_config_path(args.config)
        app_config = get_config()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        setup_logging("INFO")
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    setup_logging("DEBUG" if args.verbose else app_config.logging.level)

    try:
        project_root = validate_directory(args.project_root, field_name="--project-root")
    except ValidationError as e:
        handle_cli_error(error=e, context="project root validation", exit_code=1, logger=logger)

    if not check_executable_installed(app_config.cargo.executable):
        logger.warning(f"'{app_config.cargo.executable}' was not found on PATH")

    cancellation = CancellationToken()
    cargo = Cargo(project_root.resolve(), config=app_config, cancellation=cancellation)

    try:
        if args.command == "program":
            if not cargo_args:
                raise ValidationError("cargo arguments are required after '--'", field_name="cargo_args")
            artifact_filter = None
            if args.name is not None or args.kind is not None:
                artifact_filter = ArtifactFilter(name=args.name, kind=args.kind)
            request = CargoLaunchRequest(
                args=tuple(cargo_args),
                cwd=Path(args.cwd) if args.cwd else None,
                artifact_filter=artifact_filter,
            )
            program = asyncio.run(_run_with_cancellation(
                lambda: cargo.resolve_program(request, _write_diagnostic), cancellation
            ))
            print(program)
        else:
            configs = asyncio.run(_run_with_cancellation(
                lambda: cargo.get_launch_configs(args.directory), cancellation
            ))
            print(json.dumps([c.to_debug_configuration() for c in configs], indent=4))
    except (CargoLaunchError, ValidationError) as e:
        if e.__cause__ is not None:
            logger.error(f"Caused by: {e.__cause__}")
        handle_cli_error(error=e, context=args.command, exit_code=1, logger=logger)


if __name__ == "__main__":
    main_cli()
