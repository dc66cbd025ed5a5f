"""Metrics service for tracking API performance.

Singleton service to track per-operation call counts, failures and latency.
"""

import threading
from typing import Dict

# Operations tracked by the API
OPERATION_SIMILAR_USERS = "similar_users"
OPERATION_RECOMMENDED_ITEMS = "recommended_items"


class _OperationStats:
    def __init__(self):
        self.count = 0
        self.errors = 0
        self.total_latency_ms = 0.0
        self.min_latency_ms = float("inf")
        self.max_latency_ms = 0.0

    def snapshot(self) -> Dict:
        avg_latency = self.total_latency_ms / self.count if self.count > 0 else 0.0
        return {
            "count": self.count,
            "errors": self.errors,
            "average_latency_ms": round(avg_latency, 2),
            "min_latency_ms": round(self.min_latency_ms, 2) if self.count > 0 else 0.0,
            "max_latency_ms": round(self.max_latency_ms, 2),
        }


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking per operation.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize metrics counters."""
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._operations: Dict[str, _OperationStats] = {}
        self._initialized = True

    def record(self, operation: str, latency_ms: float, success: bool = True) -> None:
        """Record a call to ``operation`` with its latency.

        Failed calls count towards ``errors`` but not towards latency.

        Args:
            operation: Operation name, e.g. "similar_users"
            latency_ms: Latency in milliseconds
            success: False if the call raised
        """
        with self._lock:
            stats = self._operations.setdefault(operation, _OperationStats())
            if not success:
                stats.errors += 1
                return

            stats.count += 1
            stats.total_latency_ms += latency_ms
            stats.min_latency_ms = min(stats.min_latency_ms, latency_ms)
            stats.max_latency_ms = max(stats.max_latency_ms, latency_ms)

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary mapping each operation to its count, errors,
            average/min/max latency in milliseconds.
        """
        with self._lock:
            return {
                operation: stats.snapshot()
                for operation, stats in sorted(self._operations.items())
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._operations = {}


# Global singleton instance
metrics_service = MetricsService()
