"""Serviços do painel construídos sobre os stores."""

from nexa.services.kpi_recording import (
    KPIRecorder,
    compute_kpi_progress,
    kpi_status,
    kpi_trend,
)
from nexa.services.notifications import Activity, Notification, NotificationCenter
from nexa.services.user_admin import CreateUserRequest, UserAdminService

__all__ = [
    "Activity",
    "CreateUserRequest",
    "KPIRecorder",
    "Notification",
    "NotificationCenter",
    "UserAdminService",
    "compute_kpi_progress",
    "kpi_status",
    "kpi_trend",
]
