"""
Tech News Backend — Server-Side Session Model
==============================================

What:  ORM model for the `sessions` table backing cookie sessions.
How:   The client cookie only holds `sid`, an opaque random token. Everything
       the server knows about the session (`user_id`, `username`,
       `logged_in`) lives in `data`.
Who:   Read and written exclusively by SessionService.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from technews.database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(64), primary_key=True)

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    expires_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<SessionRecord(sid='{self.sid[:8]}...', expires_at='{self.expires_at}')>"
