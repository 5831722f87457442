"""Mock backend for testing and dry runs.

This module provides a mock implementation of TextGenerationBackend that
returns scripted replies without making network calls.

Reply sources, in order of precedence:
    - a ``responder`` callable, given ``(system, user)``;
    - a queue of scripted ``replies`` (strings, or exceptions to raise);
    - the ``default`` reply.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True)
class MockCall:
    """One recorded ``complete`` call."""

    system: str
    user: str


class MockBackend:
    """Mock implementation of TextGenerationBackend for testing."""

    name = "mock"

    def __init__(
        self,
        replies: Iterable[str | BaseException] = (),
        *,
        default: str = "",
        responder: Callable[[str, str], str] | None = None,
    ) -> None:
        self._replies: deque[str | BaseException] = deque(replies)
        self._default = default
        self._responder = responder
        self.calls: list[MockCall] = []
        self.closed = False

    def queue(self, *replies: str | BaseException) -> None:
        """Append scripted replies (or exceptions) to the queue."""
        self._replies.extend(replies)

    async def complete(self, system: str, user: str) -> str:
        """Return the next scripted reply, raising it if it is an exception."""
        self.calls.append(MockCall(system=system, user=user))
        if self._responder is not None:
            return self._responder(system, user).strip()
        if self._replies:
            reply = self._replies.popleft()
            if isinstance(reply, BaseException):
                raise reply
            return reply.strip()
        return self._default.strip()

    async def aclose(self) -> None:
        self.closed = True
