from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class RiskBand(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RISK_MESSAGES = {
    RiskBand.HIGH: "High Risk - Many cancelled orders",
    RiskBand.MEDIUM: "Medium Risk - Some cancelled orders",
    RiskBand.LOW: "Good Customer",
    RiskBand.NONE: "Courier History",
}


@dataclass(frozen=True)
class CourierStats:
    total_parcels: int = 0
    successful_parcels: int = 0
    cancelled_parcels: int = 0
    success_ratio: float = 0.0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "CourierStats":
        payload = payload or {}
        return cls(
            total_parcels=_as_int(payload.get("total_parcel")),
            successful_parcels=_as_int(payload.get("success_parcel")),
            cancelled_parcels=_as_int(payload.get("cancelled_parcel")),
            success_ratio=_as_float(payload.get("success_ratio")),
        )

    def to_dict(self) -> dict:
        return {
            "total_parcels": self.total_parcels,
            "successful_parcels": self.successful_parcels,
            "cancelled_parcels": self.cancelled_parcels,
            "success_ratio": self.success_ratio,
        }


@dataclass(frozen=True)
class CourierHistoryRecord:
    """Aggregate delivery history for one normalized phone number."""

    phone: str
    summary: CourierStats
    couriers: Dict[str, CourierStats] = field(default_factory=dict)

    @property
    def total_parcels(self) -> int:
        return self.summary.total_parcels

    @property
    def successful_parcels(self) -> int:
        return self.summary.successful_parcels

    @property
    def cancelled_parcels(self) -> int:
        return self.summary.cancelled_parcels

    @property
    def success_ratio(self) -> float:
        return self.summary.success_ratio

    def to_dict(self) -> dict:
        return {
            "phone": self.phone,
            "summary": self.summary.to_dict(),
            "couriers": {name: stats.to_dict() for name, stats in self.couriers.items()},
        }


@dataclass(frozen=True)
class RiskThresholds:
    high_cancelled: int = 5
    high_ratio: float = 50
    medium_cancelled: int = 2
    medium_ratio: float = 70
    low_ratio: float = 80

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "RiskThresholds":
        defaults = cls()
        return cls(
            high_cancelled=config.get("RISK_HIGH_CANCELLED", defaults.high_cancelled),
            high_ratio=config.get("RISK_HIGH_RATIO", defaults.high_ratio),
            medium_cancelled=config.get("RISK_MEDIUM_CANCELLED", defaults.medium_cancelled),
            medium_ratio=config.get("RISK_MEDIUM_RATIO", defaults.medium_ratio),
            low_ratio=config.get("RISK_LOW_RATIO", defaults.low_ratio),
        )


DEFAULT_THRESHOLDS = RiskThresholds()


def classify_risk(
    record: Optional[CourierHistoryRecord],
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
) -> RiskBand:
    """
    Derive the fraud-risk band from a courier history summary.

    A number with no parcels on record has no meaningful ratio and is
    classified NONE before any threshold is consulted.
    """
    if record is None or record.total_parcels <= 0:
        return RiskBand.NONE

    cancelled = record.cancelled_parcels
    ratio = record.success_ratio

    if cancelled >= thresholds.high_cancelled or ratio < thresholds.high_ratio:
        return RiskBand.HIGH
    if cancelled >= thresholds.medium_cancelled or ratio < thresholds.medium_ratio:
        return RiskBand.MEDIUM
    if ratio >= thresholds.low_ratio:
        return RiskBand.LOW
    return RiskBand.NONE


def _as_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_float(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0
