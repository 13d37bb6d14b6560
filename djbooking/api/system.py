from __future__ import annotations

from fastapi import APIRouter, Depends

from djbooking.infrastructure.health.health_monitor import HealthMonitor
from djbooking.wiring.dependencies import get_health_monitor

router = APIRouter()


@router.get("/system/status")
async def system_status(monitor: HealthMonitor = Depends(get_health_monitor)) -> dict[str, str | None]:
    return monitor.snapshot()
