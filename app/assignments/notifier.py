"""User-visible notices raised by the board engine (the toast equivalent).

Presentation layers read `notices` (or call drain()) to show them.
"""

import logging
from dataclasses import dataclass

log = logging.getLogger("inquiry.board")


@dataclass(frozen=True)
class Notice:
    level: str  # success | error
    message: str


class Notifier:
    def __init__(self):
        self.notices: list[Notice] = []

    def success(self, message: str) -> None:
        log.info(message)
        self.notices.append(Notice("success", message))

    def error(self, message: str) -> None:
        log.warning(message)
        self.notices.append(Notice("error", message))

    def drain(self) -> list[Notice]:
        """Return and clear pending notices."""
        notices, self.notices = self.notices, []
        return notices
