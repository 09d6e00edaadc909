"""User-facing messages that interrupt the flow (the client's "alert")."""
import sys
from abc import ABC, abstractmethod
from typing import TextIO


class Notifier(ABC):
    @abstractmethod
    async def alert(self, message: str) -> None:
        ...


class ConsoleNotifier(Notifier):
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stderr

    async def alert(self, message: str) -> None:
        print(f"⚠  {message}", file=self._stream, flush=True)
