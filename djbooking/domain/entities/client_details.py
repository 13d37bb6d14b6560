from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientDetails:
    name: str = ""
    email: str = ""
    phone: str = ""  # local number, country prefix is added on submission
    street: str = ""
    apt: str = ""
    city: str = ""
    state: str = ""
    message: str = ""

    def address_line(self) -> str:
        parts = [self.street, self.apt, self.city, self.state]
        return ", ".join(p for p in parts if p)
