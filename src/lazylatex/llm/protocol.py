"""Protocol defining the text-generation backend interface.

OpenAICompatibleBackend, ClaudeBackend and MockBackend all implement this
protocol, so callers depend only on ``complete`` and ``aclose``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextGenerationBackend(Protocol):
    """A request/response text-generation service."""

    name: str

    async def complete(self, system: str, user: str) -> str:
        """Send one system + user prompt pair and return the reply text.

        Args:
            system: System prompt (instructions).
            user: User prompt (the actual request).

        Returns:
            The stripped reply text.

        Raises:
            BackendError: If the service fails or answers in an unexpected shape.
        """
        ...

    async def aclose(self) -> None:
        """Release any connection resources the backend created."""
        ...
