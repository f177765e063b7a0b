"""
Human-readable summaries for the reconciler.
"""

import sys
from typing import Optional, TextIO

from .models import Domain, ReconciliationPlan
from .reconciler import TransferResult


def _minutes(value: Optional[int]) -> str:
    return "unknown" if value is None else f"{value} min"


class Reporter:
    """Prints the outcome of each reconciler action."""

    def __init__(self, output_stream: Optional[TextIO] = None, dry_run: bool = False) -> None:
        self._out = output_stream or sys.stdout
        self._prefix = "[dry-run] " if dry_run else ""

    def _print(self, line: str = "") -> None:
        print(line, file=self._out)

    def _section(self, title: str, names: list[str]) -> None:
        self._print(f"{title} ({len(names)}):")
        for name in names:
            self._print(f"  {name}")

    def report_push(self, created: list[str]) -> None:
        if not created:
            self._print("Push: all local domains already exist remotely.")
            return
        self._print(f"{self._prefix}Pushed {len(created)} domain(s):")
        for name in created:
            self._print(f"  + {name}")

    def report_update(self, updated: list[Domain]) -> None:
        self._print(f"{self._prefix}Updated {len(updated)} domain(s):")
        for domain in updated:
            self._print(f"  ~ {domain.zone_name}")

    def report_purge(self, deleted: list[str]) -> None:
        if not deleted:
            self._print("Purge: no remote domains to remove.")
            return
        self._print(f"{self._prefix}Purged {len(deleted)} domain(s):")
        for name in deleted:
            self._print(f"  - {name}")

    def report_transfer(self, result: TransferResult) -> None:
        self._print(f"{self._prefix}Requested transfer for {len(result.requested)} domain(s):")
        for name in result.requested:
            self._print(f"  > {name}")
        for name in result.skipped:
            self._print(f"  Warning: {name} is not a known secondary domain, skipped")

    def report_listing(self, plan: ReconciliationPlan, local_count: int) -> None:
        """
        Print the remote inventory followed by the drift between both sides.

        Args:
            plan: Plan computed against the latest remote inventory
            local_count: Number of local zones
        """
        remote = sorted(plan.remote, key=lambda domain: domain.zone_name)
        self._print(f"Secondary domains ({len(remote)}):")
        width = max((len(domain.zone_name) for domain in remote), default=0)
        for domain in remote:
            self._print(
                f"  {domain.zone_name:<{width}}  "
                f"{domain.status_description:<14}  "
                f"{domain.last_update or 'unknown'}  "
                f"master {domain.master_ip or 'unknown'}, "
                f"every {_minutes(domain.transfer_frequency)}"
            )

        self._print()
        self._section("Remote domains not defined locally", sorted(plan.to_purge))
        self._print()
        self._section("Local domains missing remotely", sorted(plan.to_push))
        self._print()
        self._print(f"Total: {local_count} local, {len(plan.remote_names)} remote")
