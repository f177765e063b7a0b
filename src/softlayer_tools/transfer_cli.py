"""
Command-line interface for the transfer allocation monitor.

Prints one status line such as::

    TRANSFER WARNING: 90.0% transfer used, over warning threshold of 80%. | transfer=...

and exits with the severity code: 0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN.
UNKNOWN means the check itself could not be completed.
"""

import argparse
import sys
from typing import NoReturn, Optional, TextIO

import httpx

from . import __version__
from .api_client import SoftLayerClient
from .audit_logger import AuditLogger, mask_url
from .bandwidth import BandwidthFetcher
from .config import MonitorConfig, load_api_config
from .enums import HostType, LogLevel, Severity
from .exceptions import ConfigurationError, SoftLayerToolsError
from .host_directory import HostDirectory, parse_host_type
from .threshold import STATUS_PREFIX, ThresholdEvaluator, ThresholdSettings


class MonitorArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as UNKNOWN."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{STATUS_PREFIX} {Severity.UNKNOWN.name}: {message}")
        sys.exit(Severity.UNKNOWN.exit_code)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the monitor."""
    parser = MonitorArgumentParser(
        prog="check-sl-transfer",
        description="Check SoftLayer outbound transfer usage against the monthly allocation",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--username", "-u",
        help="API username (default: $SL_USERNAME)",
    )
    parser.add_argument(
        "--api-key", "-k",
        help="API key (default: $SL_API_KEY)",
    )
    parser.add_argument(
        "--hostname", "-H",
        help="Fully qualified hostname or numeric id of the server",
    )
    parser.add_argument(
        "--type", "-T",
        dest="host_type",
        default=HostType.HARDWARE.value,
        help="Host type: Hardware, VirtualGuests or VirtualDedicatedRacks (default: Hardware)",
    )
    parser.add_argument(
        "--warning", "-w",
        type=float,
        help="Warning threshold in percent of the allocation",
    )
    parser.add_argument(
        "--critical", "-c",
        type=float,
        help="Critical threshold in percent of the allocation",
    )
    parser.add_argument(
        "--renewal-day", "-r",
        type=int,
        default=0,
        help="Day of month the allocation renews; projected overage is ignored that day",
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        help="API request timeout in seconds (default: $SL_TIMEOUT or 15)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase detail on failures (up to -vvv)",
    )
    parser.add_argument(
        "--critical-on-projected",
        action="store_true",
        help="Report CRITICAL when usage is projected to exceed the allocation",
    )
    parser.add_argument(
        "--critical-on-overage",
        action="store_true",
        help="Report CRITICAL when usage currently exceeds the allocation",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Use the private network API endpoint",
    )
    parser.add_argument(
        "--summary-type",
        default="publicnet",
        help="Bandwidth summary type (default: publicnet)",
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List resolvable hostnames and exit",
    )
    return parser


def build_config(args: argparse.Namespace) -> MonitorConfig:
    """Build monitor settings from arguments, falling back to the environment."""
    api = load_api_config()
    if args.username:
        api.username = args.username.strip()
    if args.api_key:
        api.api_key = args.api_key.strip()
    if args.timeout is not None:
        api.timeout_seconds = args.timeout
    if args.private:
        api.private_network = True

    return MonitorConfig(
        api=api,
        hostname=args.hostname,
        host_type=args.host_type,
        warning_percent=args.warning,
        critical_percent=args.critical,
        renewal_day=args.renewal_day,
        projected_overage_critical=args.critical_on_projected,
        current_overage_critical=args.critical_on_overage,
        verbosity=min(args.verbose, 3),
        summary_type=args.summary_type,
    )


def format_unknown(error: SoftLayerToolsError, verbosity: int = 0) -> str:
    """
    Status line for a check that could not be completed.

    Each verbosity level adds detail: 1 the HTTP status, 2 the response
    body, 3 the request URL and error code.
    """
    parts = [f"{STATUS_PREFIX} {Severity.UNKNOWN.name}: {error.message}"]
    details = error.details or {}
    if verbosity >= 1 and details.get("status_code") is not None:
        parts.append(f"(HTTP {details['status_code']})")
    if verbosity >= 2 and details.get("body"):
        parts.append(f"body: {details['body'].strip()}")
    if verbosity >= 3:
        if details.get("url"):
            parts.append(f"url: {mask_url(details['url'])}")
        parts.append(f"code: {error.code}")
    return " ".join(parts)


def run(
    config: MonitorConfig,
    list_hosts: bool = False,
    output_stream: Optional[TextIO] = None,
    transport: Optional[httpx.BaseTransport] = None,
    logger: Optional[AuditLogger] = None,
) -> int:
    """
    Run one check.

    Args:
        config: Monitor configuration
        list_hosts: Print resolvable hostnames instead of checking one
        output_stream: Where the status line is printed (defaults to stdout)
        transport: Optional httpx transport for the API client
        logger: Optional logger

    Returns:
        Exit code equal to the severity
    """
    out = output_stream or sys.stdout
    logger = logger or AuditLogger(
        min_level=LogLevel.DEBUG if config.verbosity >= 3 else LogLevel.WARN,
    )

    try:
        problems = config.validate()
        if problems:
            raise ConfigurationError(code="invalid_config", message="; ".join(problems))
        host_type = parse_host_type(config.host_type)

        with SoftLayerClient(config.api, logger=logger, transport=transport) as client:
            directory = HostDirectory(client, host_type, logger=logger)

            if list_hosts and not config.hostname:
                for hostname in directory.hostnames():
                    print(hostname, file=out)
                return 0

            if not config.hostname:
                raise ConfigurationError(
                    code="missing_hostname",
                    message="no hostname given (use --hostname or --list)",
                )

            server_id = directory.resolve(config.hostname)
            snapshot = BandwidthFetcher(
                client,
                host_type,
                summary_type=config.summary_type,
                logger=logger,
            ).fetch(server_id)

    except SoftLayerToolsError as e:
        logger.log_error("transfer_cli", "Check failed", error=e)
        print(format_unknown(e, config.verbosity), file=out)
        return Severity.UNKNOWN.exit_code

    evaluator = ThresholdEvaluator(ThresholdSettings(
        warning_percent=config.warning_percent,
        critical_percent=config.critical_percent,
        renewal_day=config.renewal_day,
        projected_overage_critical=config.projected_overage_critical,
        current_overage_critical=config.current_overage_critical,
    ))
    result = evaluator.evaluate(snapshot)
    print(result.status_line(), file=out)
    return result.exit_code


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the monitor.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    return run(build_config(args), list_hosts=args.list)


if __name__ == "__main__":
    sys.exit(main())
