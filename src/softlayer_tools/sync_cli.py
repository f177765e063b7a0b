"""
Command-line interface for the secondary DNS reconciler.

Actions are selected with flags and always run in the same order, whatever
order they were given in:

- --push: create secondary zones that exist only locally
- --update: re-apply master IP and transfer frequency to every remote zone
- --purge: delete remote zones that no longer exist locally (safety gated)
- --transfer [DOMAIN ...]: request an immediate zone transfer
- --list: print the remote inventory and the drift between both sides
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, TextIO

import httpx

from . import __version__
from .api_client import SoftLayerClient
from .audit_logger import AuditLogger
from .config import DEFAULT_CONFIG_PATH, SyncConfig, load_sync_config
from .enums import LogLevel, SyncAction
from .exceptions import ConfigurationError, SoftLayerToolsError
from .local_source import LocalDomainSource
from .reconciler import ReconciliationEngine
from .registry import RemoteDomainRegistry
from .reporter import Reporter


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the reconciler."""
    parser = argparse.ArgumentParser(
        prog="sl-secondary-dns",
        description="Reconcile SoftLayer secondary DNS zones with a local zone directory",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List remote domains and differences to the local zone directory",
    )
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Delete remote domains that are not defined locally",
    )
    parser.add_argument(
        "--push",
        action="store_true",
        help="Create remote domains for local zones that are missing",
    )
    parser.add_argument(
        "--transfer", "-t",
        action="store_true",
        help="Request an immediate zone transfer (all remote domains if none are named)",
    )
    parser.add_argument(
        "--update", "-u",
        action="store_true",
        help="Re-apply master IP and transfer frequency to every remote domain",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Use the private network API endpoint",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log mutations instead of sending them",
    )
    parser.add_argument(
        "--config", "-c",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--zone-dir",
        help="Local zone directory (overrides configuration)",
    )
    parser.add_argument(
        "--master-ip",
        help="Master name server IP address (overrides configuration)",
    )
    parser.add_argument(
        "domains",
        nargs="*",
        help="Domains to transfer (with --transfer)",
    )
    return parser


def selected_actions(args: argparse.Namespace) -> list[SyncAction]:
    """Requested actions in execution order."""
    return [action for action in SyncAction if getattr(args, action.value)]


def build_config(args: argparse.Namespace) -> SyncConfig:
    """
    Load configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the config file is unreadable
    """
    config = load_sync_config(Path(args.config))
    if args.private:
        config.api.private_network = True
    if args.zone_dir:
        config.zone_directory = Path(args.zone_dir)
    if args.master_ip:
        config.master_ip = args.master_ip
    if args.dry_run:
        config.dry_run = True
    if args.debug:
        config.logging.level = LogLevel.DEBUG.value

    problems = config.logging.validate()
    if problems:
        raise ConfigurationError(code="invalid_config", message="; ".join(problems))
    return config


def run(
    config: SyncConfig,
    actions: list[SyncAction],
    domains: Optional[list[str]] = None,
    logger: Optional[AuditLogger] = None,
    output_stream: Optional[TextIO] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    """
    Execute the requested actions.

    Args:
        config: Reconciler configuration
        actions: Actions to run, in order
        domains: Explicit domains for the transfer action
        logger: Optional logger
        output_stream: Where reports are printed (defaults to stdout)
        transport: Optional httpx transport for the API client

    Returns:
        Exit code (0 on success)

    Raises:
        SoftLayerToolsError: On any fatal condition; nothing after the failing
            action runs
    """
    mutating = SyncAction.PUSH in actions or SyncAction.UPDATE in actions
    problems = config.validate(mutating=mutating)
    if problems:
        raise ConfigurationError(
            code="invalid_config",
            message="; ".join(problems),
        )

    logger = logger or AuditLogger(
        output_format=config.logging.output_format,
        min_level=LogLevel(config.logging.level),
    )
    reporter = Reporter(output_stream=output_stream, dry_run=config.dry_run)
    local_source = LocalDomainSource(
        config.zone_directory,
        min_domains=config.min_local_domains,
        logger=logger,
    )

    with SoftLayerClient(config.api, logger=logger, transport=transport) as client:
        registry = RemoteDomainRegistry(client, logger=logger, dry_run=config.dry_run)
        engine = ReconciliationEngine(
            local_source,
            registry,
            master_ip=config.master_ip,
            transfer_frequency=config.transfer_frequency,
            purge_max_fraction=config.purge_max_fraction,
            logger=logger,
        )

        # Fail early on an implausible local source, before touching the API
        logger.info(
            "sync_cli",
            f"{len(engine.local_domains)} local zone(s) in {config.zone_directory}",
        )

        for action in actions:
            logger.debug("sync_cli", f"Running {action.value}")
            if action is SyncAction.PUSH:
                reporter.report_push(engine.push())
            elif action is SyncAction.UPDATE:
                reporter.report_update(engine.update())
            elif action is SyncAction.PURGE:
                reporter.report_purge(engine.purge())
            elif action is SyncAction.TRANSFER:
                reporter.report_transfer(engine.transfer(domains))
            elif action is SyncAction.LIST:
                reporter.report_listing(engine.listing(), len(engine.local_domains))

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the reconciler.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    actions = selected_actions(args)
    if not actions:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: no action requested", file=sys.stderr)
        return 2
    if args.domains and SyncAction.TRANSFER not in actions:
        parser.error("domain arguments are only accepted with --transfer")

    logger = None
    try:
        config = build_config(args)
        logger = AuditLogger(
            output_format=config.logging.output_format,
            min_level=LogLevel(config.logging.level),
        )
        return run(config, actions, domains=args.domains, logger=logger)
    except SoftLayerToolsError as e:
        if logger is not None:
            logger.log_error("sync_cli", "Run aborted", error=e)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
