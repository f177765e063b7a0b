"""
Reconciliation engine for secondary DNS zones.

This module computes the difference between the locally defined zones and
the provider's secondary zone inventory and applies it: pushing missing
zones, forcing configuration on existing ones, purging stale ones and
requesting zone transfers.

Purging is proportion-gated: a purge that would remove every remote zone,
or more than a fifth of them, aborts before anything is deleted.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .audit_logger import AuditLogger, null_logger
from .config import PURGE_MAX_FRACTION
from .exceptions import SafetyGateError
from .local_source import LocalDomainSource
from .models import Domain, ReconciliationPlan
from .registry import RemoteDomainRegistry


@dataclass
class TransferResult:
    """Outcome of a transfer request batch."""

    requested: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # Unknown to the provider


def compute_plan(local: Iterable[str], remote: list[Domain]) -> ReconciliationPlan:
    """
    Compute push and purge candidates.

    Names are compared lowercased. Zones present on both sides appear in
    neither candidate set.
    """
    local_names = {name.lower() for name in local}
    remote_names = {domain.zone_name.lower() for domain in remote}
    return ReconciliationPlan(
        to_push=local_names - remote_names,
        to_purge=remote_names - local_names,
        remote=list(remote),
    )


def check_purge_gates(
    to_purge: set[str],
    remote_count: int,
    max_fraction: float = PURGE_MAX_FRACTION,
) -> None:
    """
    Refuse purges that would remove too much of the inventory.

    Args:
        to_purge: Zones that would be deleted
        remote_count: Number of zones currently on the provider
        max_fraction: Largest share of the inventory a purge may remove;
            values above PURGE_MAX_FRACTION are capped

    Raises:
        SafetyGateError: If every remote zone, or more than ``max_fraction``
            of them, would be deleted
    """
    if not to_purge:
        return

    max_fraction = min(max_fraction, PURGE_MAX_FRACTION)

    if len(to_purge) >= remote_count:
        raise SafetyGateError(
            code="purge_all",
            message="Refusing to purge: all domains would be deleted",
            details={"purge_count": len(to_purge), "remote_count": remote_count},
        )

    if len(to_purge) > remote_count * max_fraction:
        raise SafetyGateError(
            code="purge_fraction",
            message=(
                f"Refusing to purge {len(to_purge)} of {remote_count} domains: "
                f"more than {max_fraction:.0%} of the inventory"
            ),
            details={
                "purge_count": len(to_purge),
                "remote_count": remote_count,
                "max_fraction": max_fraction,
            },
        )


class ReconciliationEngine:
    """
    Drives push, update, purge and transfer actions for one run.

    The local zone set is read once and never changes during the run. The
    remote inventory is read through the registry's snapshot cache, so it is
    fetched on first use and again only after a mutation.
    """

    def __init__(
        self,
        local_source: LocalDomainSource,
        registry: RemoteDomainRegistry,
        master_ip: str,
        transfer_frequency: int,
        purge_max_fraction: float = PURGE_MAX_FRACTION,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._local_source = local_source
        self._registry = registry
        self._master_ip = master_ip
        self._transfer_frequency = transfer_frequency
        self._purge_max_fraction = purge_max_fraction
        self._logger = logger or null_logger()
        self._local: Optional[frozenset[str]] = None

    @property
    def local_domains(self) -> frozenset[str]:
        if self._local is None:
            self._local = frozenset(self._local_source.list_local_domains())
        return self._local

    def plan(self) -> ReconciliationPlan:
        return compute_plan(self.local_domains, self._registry.snapshot())

    def push(self) -> list[str]:
        """
        Create every local zone missing on the provider, one call per zone.

        Returns:
            Zone names created, in ascending order; empty when nothing was missing
        """
        missing = sorted(self.plan().to_push)
        if not missing:
            self._logger.info("reconciler", "Push: nothing to do")
            return []

        for zone_name in missing:
            self._registry.create_domain(zone_name, self._master_ip, self._transfer_frequency)
        return missing

    def update(self) -> list[Domain]:
        """
        Re-apply master IP and transfer frequency to every remote zone.

        The inventory is re-fetched first because it may have been changed
        outside this tool.

        Returns:
            Updated zones, ordered by zone name
        """
        remote = sorted(self._registry.refresh(), key=lambda domain: domain.zone_name)
        for domain in remote:
            self._registry.update_domain(
                domain.id,
                domain.zone_name,
                self._master_ip,
                self._transfer_frequency,
            )
        self._registry.cache.invalidate()
        return remote

    def purge(self) -> list[str]:
        """
        Delete remote zones that are not defined locally.

        Returns:
            Zone names deleted, in ascending order

        Raises:
            SafetyGateError: If the purge would remove too much; nothing is
                deleted in that case
        """
        plan = self.plan()
        if not plan.to_purge:
            self._logger.info("reconciler", "Purge: nothing to do")
            return []

        check_purge_gates(plan.to_purge, len(plan.remote_names), self._purge_max_fraction)

        by_name = {domain.zone_name: domain for domain in plan.remote}
        doomed = sorted(plan.to_purge)
        for zone_name in doomed:
            self._registry.delete_domain(by_name[zone_name].id, zone_name)
        return doomed

    def transfer(self, names: Optional[Iterable[str]] = None) -> TransferResult:
        """
        Request an immediate zone transfer.

        Args:
            names: Zones to transfer; every remote zone when omitted or empty

        Returns:
            TransferResult listing requested and skipped zones. Names unknown
            to the provider are skipped with a warning.
        """
        remote = self._registry.snapshot()
        by_name = {domain.zone_name: domain for domain in remote}

        requested = list(names or [])
        if requested:
            targets = sorted({name.lower() for name in requested})
        else:
            targets = sorted(by_name)

        result = TransferResult()
        for zone_name in targets:
            domain = by_name.get(zone_name)
            if domain is None:
                self._logger.warn(
                    "reconciler",
                    f"Unknown domain {zone_name}, skipping transfer",
                )
                result.skipped.append(zone_name)
                continue
            self._registry.request_transfer_now(domain.id, zone_name)
            result.requested.append(zone_name)
        return result

    def listing(self) -> ReconciliationPlan:
        """Plan against the latest inventory, for reporting only."""
        return self.plan()
