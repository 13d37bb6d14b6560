from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class BackendReply(BaseModel):
    """Status code and decoded JSON body of one backend call."""

    status_code: int
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        if self.status_code >= 400:
            return False
        return str(self.body.get("status", "")).lower() != "error"

    @property
    def message(self) -> str | None:
        message = self.body.get("message")
        return str(message) if message else None
