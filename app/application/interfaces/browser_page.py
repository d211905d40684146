from __future__ import annotations

import asyncio
from typing import Any, Protocol


class IBrowserPage(Protocol):
    """The slice of a live browser page the image pipeline drives.

    Timeouts are in seconds; implementations translate to their engine's unit.
    """

    async def goto(
        self, url: str, *, wait_until: str = "networkidle", timeout: float | None = None
    ) -> None:
        ...

    async def wait_for_selector(
        self, selector: str, *, visible: bool = False, timeout: float | None = None
    ) -> None:
        """Return once the selector matches; raise on timeout."""
        ...

    async def click(self, selector: str) -> None:
        ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Run a JS function in the page and return its serializable result."""
        ...


class IBrowserSession(Protocol):
    """Process-wide browser plus the single page shared by all requests."""

    page: IBrowserPage
    lock: asyncio.Lock

    async def close(self) -> None:
        ...
