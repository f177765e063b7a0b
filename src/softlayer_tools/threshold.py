"""
Threshold evaluation for outbound transfer allocation.

This module classifies a bandwidth snapshot into a monitoring severity and
composes the status message.

Decision order for the base severity (first match wins):
1. missing outbound amount -> UNKNOWN
2. missing allocation amount -> UNKNOWN
3. outbound >= allocation -> CRITICAL
4. used percentage against the critical, then the warning threshold,
   otherwise OK

The provider's overage flags are applied afterwards. They only ever raise
the severity, and only when the matching option asks for it; the message
clause describing the overage is added either way. The projected-overage
flag is ignored on the configured renewal day of the month.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .enums import Severity
from .models import BandwidthSnapshot


STATUS_PREFIX = "TRANSFER"


@dataclass
class ThresholdSettings:
    """Thresholds and escalation options."""

    warning_percent: Optional[float] = None
    critical_percent: Optional[float] = None
    renewal_day: int = 0  # Day of month, 0 = unset
    projected_overage_critical: bool = False
    current_overage_critical: bool = False


@dataclass
class EvaluationResult:
    """Severity and message of one check."""

    severity: Severity
    message: str
    perfdata: str = ""

    @property
    def exit_code(self) -> int:
        return self.severity.exit_code

    def status_line(self) -> str:
        return f"{STATUS_PREFIX} {self.severity.name}: {self.message}{self.perfdata}"


def escalate(current: Severity, candidate: Severity) -> Severity:
    """
    Return the more severe of two ordered severities.

    Raises:
        ValueError: If either side is UNKNOWN, which has no place in the order
    """
    if not current.is_ordered or not candidate.is_ordered:
        raise ValueError("UNKNOWN cannot be compared with other severities")
    return current if current.value >= candidate.value else candidate


def _overage(value: Optional[float], allocation: float) -> str:
    if value is None:
        return "unknown"
    return f"{value - allocation:.1f}"


def _format_threshold(percent: float) -> str:
    return f"{percent:g}"


class ThresholdEvaluator:
    """Classifies bandwidth usage against an allocation."""

    def __init__(self, settings: Optional[ThresholdSettings] = None) -> None:
        self._settings = settings or ThresholdSettings()

    @property
    def settings(self) -> ThresholdSettings:
        return self._settings

    def base_severity(
        self,
        outbound: Optional[float],
        allocation: Optional[float],
    ) -> tuple[Severity, str]:
        """
        Classify usage without looking at the overage flags.

        Args:
            outbound: Outbound amount used so far
            allocation: Allocated amount for the billing cycle

        Returns:
            Severity and message
        """
        if outbound is None:
            return Severity.UNKNOWN, "missing outbound amount"
        if allocation is None:
            return Severity.UNKNOWN, "missing allocation amount"

        if outbound >= allocation or allocation <= 0:
            return (
                Severity.CRITICAL,
                f"Bandwidth used {outbound:.1f} over allocation of {allocation:.1f}",
            )

        used = outbound * 100 / allocation
        critical = self._settings.critical_percent
        warning = self._settings.warning_percent

        if critical is not None and used >= critical:
            return (
                Severity.CRITICAL,
                f"{used:.1f}% transfer used, over critical threshold of {_format_threshold(critical)}%.",
            )
        if warning is not None and used >= warning:
            return (
                Severity.WARNING,
                f"{used:.1f}% transfer used, over warning threshold of {_format_threshold(warning)}%.",
            )
        return Severity.OK, f"{used:.1f}% allocation used"

    def evaluate(
        self,
        snapshot: BandwidthSnapshot,
        today: Optional[date] = None,
    ) -> EvaluationResult:
        """
        Evaluate a snapshot.

        Args:
            snapshot: Bandwidth figures from the provider
            today: Date used for the renewal-day exception (defaults to today)

        Returns:
            EvaluationResult with severity, message and performance data
        """
        today = today or date.today()
        outbound = snapshot.outbound_amount
        allocation = snapshot.allocation_amount

        severity, message = self.base_severity(outbound, allocation)
        if severity is Severity.UNKNOWN:
            return EvaluationResult(severity=severity, message=message)

        clause = None
        if snapshot.currently_over_allocation:
            if self._settings.current_overage_critical:
                severity = escalate(severity, Severity.CRITICAL)
            clause = (
                f"currently over allocation by {_overage(outbound, allocation)}, "
                f"projected over allocation by {_overage(snapshot.projected_usage, allocation)}"
            )
        elif (
            snapshot.projected_over_allocation
            and today.day != self._settings.renewal_day
        ):
            if self._settings.projected_overage_critical:
                severity = escalate(severity, Severity.CRITICAL)
            clause = (
                f"projected over allocation by {_overage(snapshot.projected_usage, allocation)}"
            )

        if clause:
            message = f"{message.rstrip('.')}; {clause}"

        return EvaluationResult(
            severity=severity,
            message=message,
            perfdata=self.perfdata(outbound, allocation),
        )

    def perfdata(self, outbound: float, allocation: float) -> str:
        """
        Performance data suffix in ``label=value[UOM];warn;crit;min;max`` form.

        Threshold amounts are empty when the percentage is not configured.
        """
        def amount(percent: Optional[float]) -> str:
            if percent is None:
                return ""
            return f"{allocation * percent / 100:.2f}"

        return (
            f" | transfer={outbound:.2f}GB;"
            f"{amount(self._settings.warning_percent)};"
            f"{amount(self._settings.critical_percent)};0;{allocation:.2f}"
        )
