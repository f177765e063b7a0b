"""
Remote secondary DNS registry.

Wraps the provider's SoftLayer_Dns_Secondary service: listing the account's
secondary zones, creating, updating and deleting them, and requesting
out-of-cycle zone transfers. The last fetched inventory is memoized in a
SnapshotCache that every successful mutation invalidates.
"""

from typing import Any, Callable, Generic, Optional, TypeVar

from .api_client import SoftLayerClient
from .audit_logger import AuditLogger, null_logger
from .exceptions import ProtocolError
from .models import Domain


T = TypeVar("T")

LIST_PATH = "SoftLayer_Account/getSecondaryDomains.json"
SERVICE = "SoftLayer_Dns_Secondary"


class SnapshotCache(Generic[T]):
    """
    Memoized remote snapshot with explicit invalidation.

    The loader runs on first access and after every ``invalidate()``; reads
    in between return the same object.
    """

    def __init__(self, loader: Callable[[], T]) -> None:
        self._loader = loader
        self._snapshot: Optional[T] = None
        self._valid = False

    @property
    def valid(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        self._valid = False

    def refresh(self) -> T:
        """Reload unconditionally."""
        self._snapshot = self._loader()
        self._valid = True
        return self._snapshot

    def get_or_refresh(self) -> T:
        if not self._valid:
            return self.refresh()
        return self._snapshot


def parse_domain(record: Any) -> Domain:
    """
    Build a Domain from one SoftLayer_Dns_Secondary record.

    Raises:
        ProtocolError: If the record lacks an id or zone name, or carries
            non-numeric values
    """
    if not isinstance(record, dict) or not record.get("zoneName") or "id" not in record:
        raise ProtocolError(
            code="invalid_domain_record",
            message=f"Unexpected secondary domain record: {record!r}",
        )
    try:
        domain_id = int(record["id"])
        transfer_frequency = record.get("transferFrequency")
        if transfer_frequency is not None:
            transfer_frequency = int(transfer_frequency)
    except (TypeError, ValueError) as e:
        raise ProtocolError(
            code="invalid_domain_record",
            message=(
                f"Secondary domain {record['zoneName']} has a non-numeric "
                "id or transfer frequency"
            ),
        ) from e

    return Domain(
        zone_name=str(record["zoneName"]),
        id=domain_id,
        status_id=record.get("statusId"),
        last_update=record.get("lastUpdate") or None,
        master_ip=record.get("masterIpAddress"),
        transfer_frequency=transfer_frequency,
    )


class RemoteDomainRegistry:
    """
    Queries and mutates the provider's secondary zone inventory.

    In dry-run mode mutations are only logged; nothing is sent and the
    snapshot stays valid because the remote side did not change.
    """

    def __init__(
        self,
        client: SoftLayerClient,
        logger: Optional[AuditLogger] = None,
        dry_run: bool = False,
    ) -> None:
        self._client = client
        self._logger = logger or null_logger()
        self._dry_run = dry_run
        self._cache: SnapshotCache[list[Domain]] = SnapshotCache(self.list_domains)

    @property
    def cache(self) -> SnapshotCache[list[Domain]]:
        return self._cache

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def snapshot(self) -> list[Domain]:
        """Current inventory, fetched only when missing or invalidated."""
        return self._cache.get_or_refresh()

    def refresh(self) -> list[Domain]:
        return self._cache.refresh()

    def list_domains(self) -> list[Domain]:
        """
        Fetch the full secondary zone inventory.

        Raises:
            NetworkError, ApiError: If the request fails
            ProtocolError: If the response is not a list of domain records
        """
        data = self._client.get(LIST_PATH)
        if not isinstance(data, list):
            raise ProtocolError(
                code="invalid_domain_list",
                message=f"Expected a list of secondary domains, got {type(data).__name__}",
            )
        domains = [parse_domain(record) for record in data]
        self._logger.debug("registry", f"Fetched {len(domains)} secondary domain(s)")
        return domains

    def create_domain(self, zone_name: str, master_ip: str, transfer_frequency: int) -> None:
        """
        Register one new secondary zone.

        The API accepts a list of templates; exactly one is sent per call.

        Raises:
            TypeError: If more than one zone is passed
        """
        if not isinstance(zone_name, str):
            raise TypeError("create_domain takes exactly one zone name per call")
        template = self._template(zone_name, master_ip, transfer_frequency)
        if self._skip("create", zone_name):
            return
        self._client.post(f"{SERVICE}/createObjects.json", {"parameters": [[template]]})
        self._logger.info("registry", f"Created secondary zone {template['zoneName']}", template)
        self._cache.invalidate()

    def update_domain(
        self,
        domain_id: int,
        zone_name: str,
        master_ip: str,
        transfer_frequency: int,
    ) -> None:
        """Overwrite a zone's master IP and transfer frequency."""
        template = self._template(zone_name, master_ip, transfer_frequency)
        if self._skip("update", zone_name):
            return
        self._client.put(f"{SERVICE}/{domain_id}.json", {"parameters": [template]})
        self._logger.info(
            "registry",
            f"Updated secondary zone {template['zoneName']}",
            dict(template, id=domain_id),
        )
        self._cache.invalidate()

    def delete_domain(self, domain_id: int, zone_name: str = "") -> None:
        if self._skip("delete", zone_name or str(domain_id)):
            return
        self._client.delete(f"{SERVICE}/{domain_id}.json")
        self._logger.info(
            "registry",
            f"Deleted secondary zone {zone_name or domain_id}",
            {"id": domain_id},
        )
        self._cache.invalidate()

    def request_transfer_now(self, domain_id: int, zone_name: str = "") -> None:
        if self._skip("transfer", zone_name or str(domain_id)):
            return
        self._client.get(f"{SERVICE}/{domain_id}/transferNow.json")
        self._logger.info(
            "registry",
            f"Requested zone transfer for {zone_name or domain_id}",
            {"id": domain_id},
        )
        self._cache.invalidate()

    @staticmethod
    def _template(zone_name: str, master_ip: str, transfer_frequency: int) -> dict:
        return {
            "zoneName": zone_name.lower(),
            "masterIpAddress": master_ip,
            "transferFrequency": int(transfer_frequency),
        }

    def _skip(self, action: str, zone_name: str) -> bool:
        if self._dry_run:
            self._logger.info("registry", f"[dry-run] would {action} {zone_name}")
        return self._dry_run
