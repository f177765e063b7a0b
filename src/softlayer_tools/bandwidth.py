"""
Bandwidth summary retrieval for the transfer monitor.

Two dependent calls per check: the server's metric tracking object id, then
the bandwidth summary of that object.
"""

from typing import Any, Optional

from .api_client import SoftLayerClient
from .audit_logger import AuditLogger, null_logger
from .enums import HostType
from .exceptions import ProtocolError
from .models import BandwidthSnapshot


def _amount(value: Any) -> Optional[float]:
    # Decimal fields arrive as strings, e.g. "450.123"
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ProtocolError(
            code="invalid_amount",
            message=f"Expected a numeric amount, got {value!r}",
        ) from None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no")
    return bool(value)


def parse_summary(data: Any) -> BandwidthSnapshot:
    """
    Build a snapshot from a bandwidth summary object.

    Raises:
        ProtocolError: If the summary is not a JSON object or holds a
            non-numeric amount
    """
    if not isinstance(data, dict):
        raise ProtocolError(
            code="invalid_summary",
            message=f"Expected a bandwidth summary object, got {type(data).__name__}",
        )
    return BandwidthSnapshot(
        outbound_amount=_amount(data.get("outboundBandwidthAmount")),
        allocation_amount=_amount(data.get("allocationAmount")),
        currently_over_allocation=_flag(data.get("currentlyOverAllocationFlag")),
        projected_over_allocation=_flag(data.get("projectedOverAllocationFlag")),
        projected_usage=_amount(data.get("projectedBandwidthUsage")),
    )


class BandwidthFetcher:
    """Retrieves the current bandwidth summary of a server."""

    SUMMARY_SERVICE = "SoftLayer_Metric_Tracking_Object"

    def __init__(
        self,
        client: SoftLayerClient,
        host_type: HostType,
        summary_type: str = "publicnet",
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._client = client
        self._host_type = host_type
        self._summary_type = summary_type
        self._logger = logger or null_logger()

    def metric_tracking_object_id(self, server_id: int) -> int:
        data = self._client.get(
            f"{self._host_type.service}/{server_id}/getMetricTrackingObjectId.json"
        )
        try:
            return int(data)
        except (TypeError, ValueError):
            raise ProtocolError(
                code="invalid_tracking_object",
                message=f"Server {server_id} has no metric tracking object (got {data!r})",
                details={"server_id": server_id},
            ) from None

    def fetch(self, server_id: int) -> BandwidthSnapshot:
        """
        Fetch the bandwidth snapshot for a resolved server.

        Raises:
            NetworkError, ApiError: If either call fails
            ProtocolError: If either response has an unexpected shape
        """
        tracking_id = self.metric_tracking_object_id(server_id)
        data = self._client.get(
            f"{self.SUMMARY_SERVICE}/{tracking_id}/getSummary/{self._summary_type}.json"
        )
        snapshot = parse_summary(data)
        self._logger.debug(
            "bandwidth",
            f"Bandwidth summary for server {server_id}",
            {"tracking_object_id": tracking_id, "summary": data},
        )
        return snapshot
