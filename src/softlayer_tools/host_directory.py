"""
Hostname to server id resolution for the transfer monitor.
"""

from typing import Any, Optional

from .api_client import SoftLayerClient
from .audit_logger import AuditLogger, null_logger
from .enums import HostType
from .exceptions import ConfigurationError, HostNotFoundError, ProtocolError
from .models import Server
from .natural_sort import natural_sorted


def parse_host_type(value: str) -> HostType:
    """
    Validate a host type name.

    Raises:
        ConfigurationError: If the value is not Hardware, VirtualGuests or
            VirtualDedicatedRacks
    """
    try:
        return HostType(value)
    except ValueError:
        raise ConfigurationError(
            code="invalid_host_type",
            message=(
                f"Invalid host type {value!r}; expected one of "
                f"{', '.join(t.value for t in HostType)}"
            ),
        ) from None


class HostDirectory:
    """
    Looks up servers of one type in the account inventory.

    Both the hostname and the numeric id of every server map to its id, so
    callers may pass either.
    """

    def __init__(
        self,
        client: SoftLayerClient,
        host_type: HostType,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._client = client
        self._host_type = host_type
        self._logger = logger or null_logger()
        self._servers: Optional[list[Server]] = None

    @property
    def host_type(self) -> HostType:
        return self._host_type

    def servers(self) -> list[Server]:
        """Fetch (once) every server of the configured type."""
        if self._servers is None:
            data = self._client.get(f"SoftLayer_Account/get{self._host_type.value}.json")
            if not isinstance(data, list):
                raise ProtocolError(
                    code="invalid_server_list",
                    message=f"Expected a list of {self._host_type.value}, got {type(data).__name__}",
                )
            self._servers = [self._parse_server(record) for record in data]
            self._logger.debug(
                "host_directory",
                f"Fetched {len(self._servers)} {self._host_type.value} record(s)",
            )
        return self._servers

    def _parse_server(self, record: Any) -> Server:
        if not isinstance(record, dict) or "id" not in record:
            raise ProtocolError(
                code="invalid_server_record",
                message=f"Unexpected {self._host_type.value} record: {record!r}",
            )
        try:
            server_id = int(record["id"])
        except (TypeError, ValueError) as e:
            raise ProtocolError(
                code="invalid_server_record",
                message=f"{self._host_type.value} record has a non-numeric id: {record['id']!r}",
            ) from e

        hostname = record.get(self._host_type.name_field)
        if hostname is not None and not isinstance(hostname, str):
            raise ProtocolError(
                code="invalid_server_record",
                message=f"{self._host_type.value} {server_id} has a non-string hostname",
            )
        return Server(id=server_id, hostname=hostname.lower() if hostname else None)

    def lookup_table(self) -> dict[str, int]:
        table: dict[str, int] = {}
        for server in self.servers():
            if server.hostname:
                table[server.hostname] = server.id
            table[str(server.id)] = server.id
        return table

    def resolve(self, hostname: str) -> int:
        """
        Resolve a hostname or numeric id to the provider's server id.

        Raises:
            HostNotFoundError: If no server of the configured type matches
        """
        key = str(hostname).strip().lower()
        server_id = self.lookup_table().get(key)
        if server_id is None:
            raise HostNotFoundError(
                code="host_not_found",
                message=f"{hostname} not found in {self._host_type.value}",
                details={"hostname": hostname, "host_type": self._host_type.value},
            )
        return server_id

    def hostnames(self) -> list[str]:
        """Every known hostname in natural order."""
        return natural_sorted(server.hostname for server in self.servers() if server.hostname)
