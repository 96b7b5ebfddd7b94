from __future__ import annotations

import os

from fastapi import APIRouter, Depends, Request

from bank import reload_bank
from deps.auth import require_admin
from routers.tagging import feedback_cache

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reload")
def reload_questions(request: Request):
    expected = os.getenv("ADMIN_TOKEN") or ""
    provided = request.headers.get("x-admin-token")

    if not expected:
        return {"ok": False, "error": "ADMIN_TOKEN not configured on server."}
    if provided != expected:
        return {"ok": False, "error": "unauthorized"}

    n = reload_bank()
    return {"ok": True, "count": n}


@router.get("/feedback-cache", dependencies=[Depends(require_admin)])
def feedback_cache_stats():
    return {"ok": True, "size": len(feedback_cache), "max_size": feedback_cache.max_size}


@router.delete("/feedback-cache", dependencies=[Depends(require_admin)])
def clear_feedback_cache():
    cleared = len(feedback_cache)
    feedback_cache.clear()
    return {"ok": True, "cleared": cleared}
