"""
Enumeration types for the SoftLayer tools.

These enums provide type-safe constants for provider status codes, monitoring
severities, host types and logging levels used by both command-line tools.
"""

from enum import Enum, IntEnum


class DomainStatus(IntEnum):
    """Status code of a secondary DNS zone as reported by the provider."""

    DISABLED = 0
    ACTIVE = 1
    TRANSFER_NOW = 2
    TRANSFER_ERROR = 3
    NEW = 4

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]

    @classmethod
    def describe(cls, status_id) -> str:
        """
        Human readable description for a raw status id.

        Unrecognized or missing codes are described as "unknown".
        """
        try:
            return cls(int(status_id)).description
        except (TypeError, ValueError):
            return "unknown"


_STATUS_DESCRIPTIONS = {
    DomainStatus.DISABLED: "Disabled",
    DomainStatus.ACTIVE: "Active",
    DomainStatus.TRANSFER_NOW: "Transfer Now",
    DomainStatus.TRANSFER_ERROR: "Transfer Error",
    DomainStatus.NEW: "New",
}


class Severity(Enum):
    """
    Result of a status check.

    OK, WARNING and CRITICAL are ordered business outcomes. UNKNOWN means the
    check itself could not be completed and is never compared against them.
    The value doubles as the process exit code.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def is_ordered(self) -> bool:
        return self is not Severity.UNKNOWN

    @property
    def exit_code(self) -> int:
        return self.value


class HostType(Enum):
    """Server inventories that can be searched for a hostname."""

    HARDWARE = "Hardware"
    VIRTUAL_GUESTS = "VirtualGuests"
    VIRTUAL_DEDICATED_RACKS = "VirtualDedicatedRacks"

    @property
    def service(self) -> str:
        """API service that owns servers of this type."""
        return _HOST_TYPE_SERVICES[self]

    @property
    def name_field(self) -> str:
        """Record field holding the server's hostname."""
        if self is HostType.VIRTUAL_DEDICATED_RACKS:
            return "name"
        return "fullyQualifiedDomainName"


_HOST_TYPE_SERVICES = {
    HostType.HARDWARE: "SoftLayer_Hardware_Server",
    HostType.VIRTUAL_GUESTS: "SoftLayer_Virtual_Guest",
    HostType.VIRTUAL_DEDICATED_RACKS: "SoftLayer_Network_Bandwidth_Version1_Allotment",
}


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LOG_LEVEL_RANKS[self]


_LOG_LEVEL_RANKS = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class SyncAction(Enum):
    """Reconciler actions, declared in execution order."""

    PUSH = "push"
    UPDATE = "update"
    PURGE = "purge"
    TRANSFER = "transfer"
    LIST = "list"
