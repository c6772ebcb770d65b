# backend/schedule_engine/services/base.py
"""
Base Service Pattern for the availability engine

Provides common functionality for service classes:
- Logging
- Performance monitoring (slow-operation warnings and Prometheus metrics)
"""

from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from ..core.config import Settings, settings as default_settings
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class BaseService:
    """
    Base class for service layer components.

    Services are stateless apart from their settings; per-call data is
    passed in and nothing computed is retained between calls.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings
        self.logger = logging.getLogger(self.__class__.__name__)
        self._metrics: Dict[str, Dict[str, float]] = {}

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("compute_slot_map")
            def compute_slot_map(self, ...):
                ...

        Args:
            operation_name: Name of the operation for metrics

        Returns:
            Decorator function
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                success = False
                error_type = None
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - start_time
                    self._record_metric(operation_name, elapsed, success)

                    threshold = getattr(self, "settings", default_settings).slow_operation_seconds
                    if elapsed > threshold:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="success" if success else "error",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        metric = self._metrics.setdefault(
            operation, {"count": 0, "total_time": 0.0, "success_count": 0, "failure_count": 0}
        )
        metric["count"] += 1
        metric["total_time"] += elapsed
        if success:
            metric["success_count"] += 1
        else:
            metric["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """Per-operation counters with average duration, for diagnostics."""
        result: Dict[str, Dict[str, float]] = {}
        for operation, metric in self._metrics.items():
            count = metric["count"]
            result[operation] = {
                **metric,
                "avg_time": metric["total_time"] / count if count else 0.0,
            }
        return result
