"""Progress notification contract."""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel


class ProgressMessageType(str, Enum):
    """Kinds of progress messages."""

    LABEL = "label"
    DETECTION = "detection"


class ProgressMessage(BaseModel):
    """A message sent to the progress sink."""

    type: ProgressMessageType
    message: str


class ProgressDispatcher(ABC):
    """Sink for progress messages.

    Implementations raise ``ClientDisconnectedError`` from ``send`` once the
    client on the other side is gone.
    """

    @abstractmethod
    def send(self, message: ProgressMessage) -> None:
        """Deliver a message to the client."""

    def label(self, text: str) -> None:
        """Send a human-readable status label."""
        self.send(ProgressMessage(type=ProgressMessageType.LABEL, message=text))
