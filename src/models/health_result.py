# src/models/health_result.py

"""Outcome of one upstream connectivity check."""

from dataclasses import asdict, dataclass

STATUS_OK = "ok"
STATUS_SLOW = "slow"
STATUS_DOWN = "down"


@dataclass
class HealthResult:
    """Result of a single upstream health check."""

    source_id: str
    status: str  # STATUS_OK, STATUS_SLOW or STATUS_DOWN
    latency_ms: float
    message: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
