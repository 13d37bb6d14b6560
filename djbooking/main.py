import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from djbooking.api.system import router as system_router
from djbooking.api.v1.confirmation import router as confirmation_router
from djbooking.api.v1.wizard import router as wizard_router
from djbooking.core.config import settings
from djbooking.wiring.dependencies import get_booking_backend, get_health_monitor

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "step", "unique_id", "generation", "status", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    monitor = get_health_monitor()
    monitor.start()
    try:
        yield
    finally:
        await monitor.stop()
        await get_booking_backend().aclose()
        get_booking_backend.cache_clear()


app = FastAPI(title="DJ Booking Flow", version="1.0.0", lifespan=lifespan)

app.include_router(wizard_router, prefix="/wizard", tags=["wizard"])
app.include_router(confirmation_router, tags=["confirmation"])
app.include_router(system_router, tags=["system"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
