from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VerdictKind(str, Enum):
    ok = "ok"
    rejected = "rejected"  # business rule: slot blocked or duplicate booking
    transport = "transport"  # backend unreachable or unreadable, gate fails closed


@dataclass(frozen=True)
class AvailabilityVerdict:
    available: bool
    kind: VerdictKind = VerdictKind.ok
    reason: str | None = None
    scroll_to_top: bool = False

    @classmethod
    def passed(cls) -> "AvailabilityVerdict":
        return cls(available=True)

    @classmethod
    def rejected(cls, reason: str) -> "AvailabilityVerdict":
        return cls(available=False, kind=VerdictKind.rejected, reason=reason, scroll_to_top=True)

    @classmethod
    def unreachable(cls, reason: str) -> "AvailabilityVerdict":
        return cls(available=False, kind=VerdictKind.transport, reason=reason, scroll_to_top=True)
