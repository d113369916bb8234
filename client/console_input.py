from __future__ import annotations
from typing import Protocol

import aioconsole


class LineReader(Protocol):
    async def readline(self, prompt: str = "") -> str:
        """Return one line without its newline; raise EOFError when input is closed."""
        ...


class ConsoleLineReader:
    """Reads stdin without blocking the event loop."""

    async def readline(self, prompt: str = "") -> str:
        return await aioconsole.ainput(prompt)
