"""
tracker_services -- Package init and public API.

Responsibility:
    Stateful orchestration over the pure engines (tracker_engines/).  This
    is the only layer that reads the clock or holds settings.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction (enforced by tests/architecture/test_layer_boundaries.py):
        tracker_services/ -> tracker_engines/  (allowed)
        tracker_services/ -> tracker_kernel/   (allowed)
        tracker_services/ -> tracker_config/   (allowed)
        tracker_engines/  -> tracker_services/ (FORBIDDEN)
        tracker_kernel/   -> tracker_services/ (FORBIDDEN)
"""

from tracker_kernel.logging_config import get_logger

logger = get_logger("services")

from tracker_services.analytics_service import AnalyticsService, compute_analytics
from tracker_services.invoice_service import InvoiceService
from tracker_services.timer_service import TimerService, TimerState

__all__ = [
    "AnalyticsService",
    "InvoiceService",
    "TimerService",
    "TimerState",
    "compute_analytics",
]
