from __future__ import annotations

from dataclasses import dataclass, field

from transit_se.domain.models import UsageStats


@dataclass(slots=True)
class UsageCounter:
    """Per-client request counter keyed by request path (no query string)."""

    total: int = 0
    by_endpoint: dict[str, int] = field(default_factory=dict)

    def record(self, path: str) -> None:
        key = path.split("?", 1)[0]
        self.total += 1
        self.by_endpoint[key] = self.by_endpoint.get(key, 0) + 1

    def snapshot(self) -> UsageStats:
        return UsageStats(total_requests=self.total, by_endpoint=dict(self.by_endpoint))
