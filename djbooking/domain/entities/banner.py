from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Banner:
    level: str  # "error" | "info" | "success"
    message: str
    dismissible: bool = True
