from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Attempt(Base):
    """One tagged batch of drill answers."""

    __tablename__ = "attempts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    total: Mapped[int] = mapped_column(Integer)
    correct: Mapped[int] = mapped_column(Integer)
    # [{"id": ..., "response": {tags, severity, strategy, feedback, ...}}, ...]
    items: Mapped[list] = mapped_column(JSON)
    duration_ms: Mapped[int | None] = mapped_column(sa.Integer, nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    def incorrect_items(self) -> list[dict]:
        """Flattened responses of the wrong answers, in submission order."""
        out = []
        for it in self.items or []:
            res = it.get("response") or {}
            if res.get("ok") and not res.get("correct"):
                out.append(res)
        return out
