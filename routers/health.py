# services/scoring/routers/health.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text

from alembic.config import Config
from alembic.script import ScriptDirectory
from db import engine
from feedback import FeedbackProvider
from routers.tagging import get_feedback_provider

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/db")
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"db_error: {type(e).__name__}: {e}")


def alembic_heads(ini_path: str = "alembic.ini") -> list[str]:
    script = ScriptDirectory.from_config(Config(ini_path))
    return list(script.get_heads())


@router.get("/migrations")
def health_migrations():
    heads: list[str] = []
    db_ver = None
    try:
        heads = alembic_heads()
    except Exception:
        heads = []

    try:
        with engine.connect() as conn:
            try:
                db_ver = conn.execute(
                    text("SELECT version_num FROM alembic_version")
                ).scalar_one_or_none()
            except Exception:
                db_ver = None
    except Exception as e:
        return {
            "ok": False,
            "error": f"db_connect_failed: {e}",
            "code_heads": heads,
            "db_version": db_ver,
        }

    synced = (db_ver in heads) if heads else False
    return {
        "ok": synced,
        "synced": synced,
        "single_head": len(heads) == 1,
        "db_version": db_ver,
        "code_heads": heads,
    }


@router.get("/feedback")
def health_feedback(provider: FeedbackProvider = Depends(get_feedback_provider)):
    return {
        "ok": True,
        "mode": "llm" if provider.uses_llm else "template",
        "model": provider.model if provider.uses_llm else None,
        "cache_size": len(provider.cache),
    }
