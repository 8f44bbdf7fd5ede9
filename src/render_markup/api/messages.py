"""User-facing message channel.

Malformed markup is not an exception for the caller: the problem is reported
to the messenger and the input compiles to an empty tree. Hosts plug in their
own messenger to surface these reports to users.
"""

from typing import List, Optional, Protocol

from render_markup.shared.logging import get_logger


class Messenger(Protocol):
    """Receives problems that should be shown to the user."""

    def error(self, message: str) -> None:
        ...


class LoggingMessenger:
    """Messenger that logs reports and keeps them for later inspection."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, correlation_id, "messenger")
        self.messages: List[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)
        self.logger.warning(message)

    def clear(self) -> None:
        self.messages.clear()
