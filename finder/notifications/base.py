"""Notification channel interface."""

from abc import ABC, abstractmethod
from typing import Any


class Notifier(ABC):
    """Base protocol for outbound message channels."""

    @abstractmethod
    async def send(self, message: str, *, chat_id: str, **kwargs: Any) -> bool:
        """Send ``message`` to one chat.

        Args:
            message: The message body text.
            chat_id: Destination chat identifier on the channel.
            **kwargs: Additional provider-specific parameters.

        Returns:
            True if sent successfully, False otherwise.
        """
        ...
