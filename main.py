from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import get_settings
from database import Base, engine
from routers.admin import router as admin_router
from routers.candidate import router as candidate_router
from routers.client import router as client_router
from routers.common import router as common_router
from routers.deps import get_scheduler
from routers.recruiter import router as recruiter_router
from utils.errors import AppError


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="JobSetu Backend")

# Create tables (simple projects; for production use migrations).
Base.metadata.create_all(bind=engine)

app.include_router(common_router)
app.include_router(candidate_router)
app.include_router(client_router)
app.include_router(admin_router)
app.include_router(recruiter_router)


@app.exception_handler(AppError)
async def _app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.on_event("startup")
def _start_scheduler():
    # Background worker for outgoing email.
    sched = get_scheduler()
    if not sched.running:
        sched.start()
    app.state._scheduler = sched


@app.on_event("shutdown")
def _stop_scheduler():
    sched = getattr(app.state, "_scheduler", None)
    if sched and sched.running:
        sched.shutdown(wait=False)
