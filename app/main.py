import logging

from fastapi import FastAPI

from app.api.v1.router import api_router
from app.services.reorder_scheduler import ReorderScanScheduler


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(title="Replenishment Analytics")
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def _startup_event() -> None:
    scheduler = ReorderScanScheduler()
    scheduler.start()
    app.state.reorder_scheduler = scheduler


@app.on_event("shutdown")
def _shutdown_event() -> None:
    scheduler = getattr(app.state, "reorder_scheduler", None)
    if scheduler is not None:
        scheduler.shutdown()


@app.get("/")
def root():
    return {"status": "ok", "message": "Replenishment analytics backend running"}
