from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field


@dataclass
class MetricsStore:
    request_count: int = 0
    request_count_by_status: dict[int, int] = field(default_factory=lambda: defaultdict(int))
    request_latency_ms: list[float] = field(default_factory=list)
    operation_count: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    operation_latency_ms: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))

    def record_request(self, status_code: int, duration_ms: float) -> None:
        self.request_count += 1
        self.request_count_by_status[status_code] += 1
        self.request_latency_ms.append(duration_ms)

    def record_operation(self, operation: str, duration_ms: float) -> None:
        self.operation_count[operation] += 1
        self.operation_latency_ms[operation].append(duration_ms)

    def snapshot(self) -> dict[str, object]:
        return {
            "request_count": self.request_count,
            "request_count_by_status": {
                str(code): count for code, count in sorted(self.request_count_by_status.items())
            },
            "operation_count": dict(sorted(self.operation_count.items())),
            "operation_avg_ms": {
                operation: round(sum(latencies) / len(latencies), 3)
                for operation, latencies in sorted(self.operation_latency_ms.items())
                if latencies
            },
        }


metrics = MetricsStore()
