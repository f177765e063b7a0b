"""
Local authoritative zone inventory.

The zone directory holds one entry per zone, named after the zone. Anything
that does not look like a zone name (dotfiles, names without a dot, helper
files containing an underscore) is ignored.
"""

import os
import re
from pathlib import Path
from typing import Optional

from .audit_logger import AuditLogger, null_logger
from .exceptions import LocalSourceError


# Word character first, at least one dot that is neither first nor last
ZONE_NAME_PATTERN = re.compile(r"^\w[^\s/]*\.[^\s/]*[^\s/.]$")


def looks_like_zone_name(name: str) -> bool:
    """Check whether a directory entry name is a zone name."""
    return "_" not in name and ZONE_NAME_PATTERN.match(name) is not None


class LocalDomainSource:
    """
    Enumerates the zones defined locally.

    The result must contain more than ``min_domains`` names. A smaller set is
    treated as a broken source rather than as the truth, so that an empty or
    unmounted directory can never drive a mass purge.
    """

    def __init__(
        self,
        directory: Path,
        min_domains: int = 10,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._directory = Path(directory)
        self._min_domains = min_domains
        self._logger = logger or null_logger()

    @property
    def directory(self) -> Path:
        return self._directory

    def list_local_domains(self) -> set[str]:
        """
        Read the zone directory.

        Returns:
            Lowercased zone names

        Raises:
            LocalSourceError: If the directory cannot be read or holds
                too few zones
        """
        try:
            entries = os.listdir(self._directory)
        except OSError as e:
            raise LocalSourceError(
                code="unreadable",
                message=f"Cannot open zone directory {self._directory}: {e.strerror or e}",
                details={"directory": str(self._directory)},
            ) from e

        domains = {name.lower() for name in entries if looks_like_zone_name(name)}
        self._logger.debug(
            "local_source",
            f"Found {len(domains)} zone(s) in {self._directory}",
            {"entries": len(entries)},
        )

        if len(domains) <= self._min_domains:
            raise LocalSourceError(
                code="too_few_domains",
                message=(
                    f"Only {len(domains)} zone(s) found in {self._directory}, "
                    f"need more than {self._min_domains}; refusing to continue"
                ),
                details={
                    "directory": str(self._directory),
                    "found": len(domains),
                    "minimum": self._min_domains,
                },
            )
        return domains
