"""
Data models for the SoftLayer tools.

This module defines the records exchanged with the provider API: secondary
DNS zones, servers, bandwidth snapshots, and the per-run reconciliation plan.
Nothing here is persisted; every object lives for a single run.
"""

from dataclasses import dataclass, field
from typing import Optional

from .enums import DomainStatus


@dataclass
class Domain:
    """A secondary DNS zone known to the provider."""

    zone_name: str  # Always lowercase
    id: Optional[int] = None
    status_id: Optional[int] = None
    last_update: Optional[str] = None
    master_ip: Optional[str] = None
    transfer_frequency: Optional[int] = None

    def __post_init__(self) -> None:
        self.zone_name = self.zone_name.lower()

    @property
    def status_description(self) -> str:
        return DomainStatus.describe(self.status_id)


@dataclass
class Server:
    """A server entry from one of the account inventories."""

    id: int
    hostname: Optional[str] = None


@dataclass
class BandwidthSnapshot:
    """
    Outbound transfer figures for one server at one point in time.

    Amounts are in the provider's unit (GB). A missing amount is None.
    """

    outbound_amount: Optional[float]
    allocation_amount: Optional[float]
    currently_over_allocation: bool = False
    projected_over_allocation: bool = False
    projected_usage: Optional[float] = None


@dataclass
class ReconciliationPlan:
    """Set differences between the local and remote zone inventories."""

    to_push: set[str]  # Local only
    to_purge: set[str]  # Remote only
    remote: list[Domain] = field(default_factory=list)

    @property
    def remote_names(self) -> set[str]:
        return {domain.zone_name for domain in self.remote}

    @property
    def in_sync(self) -> bool:
        return not self.to_push and not self.to_purge
