from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    wedding = "Wedding"
    birthday = "Birthday"
    sport = "Sport"
    holiday_party = "Holiday Party"
    private = "Private"
    night_life = "NightLife"
    cruise_party = "Cruise Party"


# deposit price per event type, whole dollars
PRICING_TABLE: dict[EventType, int] = {
    EventType.wedding: 500,
    EventType.birthday: 350,
    EventType.sport: 350,
    EventType.holiday_party: 350,
    EventType.private: 350,
    EventType.night_life: 400,
    EventType.cruise_party: 350,
}
