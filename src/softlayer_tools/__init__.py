"""
SoftLayer Tools - secondary DNS reconciliation and transfer monitoring.

This package provides two command-line tools for a SoftLayer account: a
reconciler that keeps the provider's secondary DNS zones in line with a local
zone directory, and a status check that reports outbound transfer usage
against the monthly allocation.
"""

__version__ = "0.1.0"

from softlayer_tools.exceptions import (
    SoftLayerToolsError,
    ConfigurationError,
    LocalSourceError,
    NetworkError,
    ApiError,
    ProtocolError,
    SafetyGateError,
    HostNotFoundError,
)
from softlayer_tools.enums import (
    DomainStatus,
    Severity,
    HostType,
    LogLevel,
    SyncAction,
)
from softlayer_tools.models import (
    Domain,
    Server,
    BandwidthSnapshot,
    ReconciliationPlan,
)
from softlayer_tools.config import (
    ApiConfig,
    LoggingConfig,
    SyncConfig,
    MonitorConfig,
    load_api_config,
    load_sync_config,
)
from softlayer_tools.audit_logger import AuditLogger, LogEntry
from softlayer_tools.api_client import SoftLayerClient
from softlayer_tools.local_source import LocalDomainSource
from softlayer_tools.registry import RemoteDomainRegistry, SnapshotCache
from softlayer_tools.reconciler import (
    ReconciliationEngine,
    TransferResult,
    compute_plan,
    check_purge_gates,
)
from softlayer_tools.reporter import Reporter
from softlayer_tools.host_directory import HostDirectory
from softlayer_tools.bandwidth import BandwidthFetcher
from softlayer_tools.threshold import (
    ThresholdEvaluator,
    ThresholdSettings,
    EvaluationResult,
    escalate,
)
from softlayer_tools.natural_sort import natural_key, natural_sorted

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "SoftLayerToolsError",
    "ConfigurationError",
    "LocalSourceError",
    "NetworkError",
    "ApiError",
    "ProtocolError",
    "SafetyGateError",
    "HostNotFoundError",
    # Enums
    "DomainStatus",
    "Severity",
    "HostType",
    "LogLevel",
    "SyncAction",
    # Models
    "Domain",
    "Server",
    "BandwidthSnapshot",
    "ReconciliationPlan",
    # Config
    "ApiConfig",
    "LoggingConfig",
    "SyncConfig",
    "MonitorConfig",
    "load_api_config",
    "load_sync_config",
    # Logging
    "AuditLogger",
    "LogEntry",
    # Reconciler
    "SoftLayerClient",
    "LocalDomainSource",
    "RemoteDomainRegistry",
    "SnapshotCache",
    "ReconciliationEngine",
    "TransferResult",
    "compute_plan",
    "check_purge_gates",
    "Reporter",
    # Transfer monitor
    "HostDirectory",
    "BandwidthFetcher",
    "ThresholdEvaluator",
    "ThresholdSettings",
    "EvaluationResult",
    "escalate",
    "natural_key",
    "natural_sorted",
]
