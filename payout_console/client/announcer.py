"""Screen reader style status announcements."""

from dataclasses import dataclass
from enum import Enum

from payout_console.core.logging import LoggerMixin


class Politeness(str, Enum):
    POLITE = "polite"
    ASSERTIVE = "assertive"


@dataclass(frozen=True)
class Announcement:
    message: str
    politeness: Politeness = Politeness.POLITE


class Announcer(LoggerMixin):
    """Collects announcements in the order they were made."""

    def __init__(self) -> None:
        self.announcements: list[Announcement] = []

    def announce(self, message: str, politeness: Politeness = Politeness.POLITE) -> None:
        self.announcements.append(Announcement(message, politeness))
        self.logger.info("Announcement", message=message, politeness=politeness.value)

    @property
    def latest(self) -> Announcement | None:
        return self.announcements[-1] if self.announcements else None

    def messages(self) -> list[str]:
        return [a.message for a in self.announcements]

    def clear(self) -> None:
        self.announcements.clear()
