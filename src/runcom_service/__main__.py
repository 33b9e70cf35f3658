#!/usr/bin/env python3
"""Main entry point for managing an rc.d service."""

from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import yaml

from . import __version__
from .config import Config, resolve_config_path
from .daemon import CommandDaemon
from .errors import NotInstalledError, ServiceError
from .services import Status, new_service
from .services.rcconf import read_startup_list

ACTIONS = ("install", "uninstall", "start", "stop", "restart", "status", "run")


def setup_logging(
    level: str = "INFO",
    log_dir: Path | None = None,
    log_file: str = "runcom_service.log",
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Set up logging to the console, and to a rotating file if log_dir is set."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    # Make idempotent: clear existing handlers so we don't double-log
    if root.handlers:
        root.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="runcom-service",
        description="Install and control a daemon as an OpenBSD rc.d service.",
    )
    p.add_argument("-c", "--config", type=Path, help="Path to configuration file")
    p.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    p.add_argument(
        "--force",
        action="store_true",
        help="Use rc.d even if the platform isn't detected as OpenBSD.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )

    actions = p.add_mutually_exclusive_group(required=True)
    actions.add_argument("--install", action="store_true", help="Install the service")
    actions.add_argument(
        "--uninstall", action="store_true", help="Uninstall the service"
    )
    actions.add_argument("--start", action="store_true", help="Start the service")
    actions.add_argument("--stop", action="store_true", help="Stop the service")
    actions.add_argument(
        "--restart", action="store_true", help="Restart the service"
    )
    actions.add_argument(
        "--status", action="store_true", help="Show the service status"
    )
    actions.add_argument(
        "--run",
        action="store_true",
        help="Run the configured command in the foreground until SIGTERM/SIGINT",
    )
    return p


def print_status(service, cfg: Config) -> int:
    try:
        status = service.status()
    except NotInstalledError as e:
        logging.debug(str(e))
        print(f"{cfg.name}: {Status.NOT_INSTALLED.value}")
        return 1

    print(f"{cfg.name}: {status.value}")
    enabled = cfg.name in read_startup_list(cfg.rc_conf_local)
    print(f"  Started with system: {'yes' if enabled else 'no'}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    action = next(a for a in ACTIONS if getattr(args, a))

    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        cfg = Config.from_file(resolve_config_path(args.config))
    except (OSError, ValueError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        return 2

    setup_logging(
        "DEBUG" if args.verbose else cfg.log_level,
        cfg.log_directory,
        cfg.log_file,
        max_bytes=cfg.log_max_bytes,
        backup_count=cfg.log_backup_count,
    )

    try:
        program = CommandDaemon(cfg.command, stop_timeout=cfg.stop_timeout)
        service = new_service(
            program,
            cfg.descriptor(),
            script_dir=cfg.script_dir,
            rc_conf_local=cfg.rc_conf_local,
            force=args.force,
        )

        if action == "status":
            return print_status(service, cfg)

        getattr(service, action)()
    except ServiceError as e:
        logging.error(str(e))
        return 1

    if action != "run":
        print(f"{service}: {action} done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
