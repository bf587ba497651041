"""Health probes.

- /health: the process answers
- /health/live: liveness, never touches the database
- /health/ready: readiness, 503 until the database answers
- /health/detailed: database plus host disk and memory
"""

import logging
import time
from datetime import datetime
from typing import Dict, Any

import psutil
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupware import __version__
from groupware.api.deps import get_db

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)

DISK_WARNING_PERCENT = 85
DISK_CRITICAL_PERCENT = 95
MEMORY_WARNING_PERCENT = 85
MEMORY_CRITICAL_PERCENT = 95

GB = 1024 ** 3


def _now() -> str:
    return datetime.utcnow().isoformat()


def _usage_status(percent_used: float, warning: float, critical: float) -> str:
    if percent_used >= critical:
        return "critical"
    if percent_used >= warning:
        return "warning"
    return "healthy"


def check_database(db: Session) -> Dict[str, Any]:
    """Round-trip a trivial query and report the dialect and latency."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1")).fetchone()
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "dialect": db.get_bind().dialect.name,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }


def check_disk(path: str = "/") -> Dict[str, Any]:
    disk = psutil.disk_usage(path)
    return {
        "status": _usage_status(disk.percent, DISK_WARNING_PERCENT, DISK_CRITICAL_PERCENT),
        "total_gb": round(disk.total / GB, 2),
        "free_gb": round(disk.free / GB, 2),
        "percent_used": disk.percent,
    }


def check_memory() -> Dict[str, Any]:
    memory = psutil.virtual_memory()
    return {
        "status": _usage_status(memory.percent, MEMORY_WARNING_PERCENT, MEMORY_CRITICAL_PERCENT),
        "total_gb": round(memory.total / GB, 2),
        "available_gb": round(memory.available / GB, 2),
        "percent_used": memory.percent,
    }


def _overall(checks: Dict[str, Dict[str, Any]]) -> tuple[str, int]:
    """Fold individual check statuses into an overall status and HTTP code."""
    statuses = {check.get("status", "unknown") for check in checks.values()}
    if statuses & {"unhealthy", "critical"}:
        return "unhealthy", status.HTTP_503_SERVICE_UNAVAILABLE
    if "warning" in statuses:
        return "degraded", status.HTTP_200_OK
    return "healthy", status.HTTP_200_OK


@router.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__, "timestamp": _now()}


@router.get("/health/live")
async def liveness_probe():
    return {"status": "alive", "timestamp": _now()}


@router.get("/health/ready")
async def readiness_probe(db: Session = Depends(get_db)):
    checks = {"database": check_database(db)}
    ready = checks["database"]["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "checks": checks,
            "timestamp": _now(),
        },
    )


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    checks = {
        "database": check_database(db),
        "disk": check_disk(),
        "memory": check_memory(),
    }
    overall, http_status = _overall(checks)

    return JSONResponse(
        status_code=http_status,
        content={
            "status": overall,
            "version": __version__,
            "checks": checks,
            "timestamp": _now(),
        },
    )
