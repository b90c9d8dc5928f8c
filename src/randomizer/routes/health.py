"""Health and readiness routes."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from randomizer.store.factory import get_store_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_READYZ_PARTITION = "__readyz__"


@router.get("/healthz")
async def healthz() -> JSONResponse:
    return JSONResponse({"ok": True})


@router.get("/readyz")
async def readyz() -> JSONResponse:
    """Report whether the group store answers a listing."""
    try:
        await get_store_factory()(_READYZ_PARTITION).list()
    except Exception as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse({"ok": False, "store": "unavailable"}, status_code=503)
    return JSONResponse({"ok": True, "store": "ok"})
