"""Toast-style notifications raised by the view controllers."""
import enum
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class Level(str, enum.Enum):
    success = "success"
    error = "error"
    warning = "warning"
    info = "info"


@dataclass(frozen=True)
class Notification:
    level: Level
    message: str


@dataclass
class Notifier:
    """Collects notifications in the order they were raised."""
    items: list[Notification] = field(default_factory=list)

    def notify(self, level: Level, message: str) -> None:
        logger.debug("%s: %s", level.value, message)
        self.items.append(Notification(level, message))

    def success(self, message: str) -> None:
        self.notify(Level.success, message)

    def error(self, message: str) -> None:
        self.notify(Level.error, message)

    def warning(self, message: str) -> None:
        self.notify(Level.warning, message)

    def info(self, message: str) -> None:
        self.notify(Level.info, message)

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self) -> None:
        self.items.clear()
