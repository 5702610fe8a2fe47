from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UsageStats:
    total_requests: int = 0
    by_endpoint: dict[str, int] = field(default_factory=dict)


def merge_usage(*stats: UsageStats) -> UsageStats:
    """Sum totals and merge endpoint maps; later inputs win on shared keys."""

    total = 0
    by_endpoint: dict[str, int] = {}
    for s in stats:
        total += s.total_requests
        by_endpoint.update(s.by_endpoint)
    return UsageStats(total_requests=total, by_endpoint=by_endpoint)
