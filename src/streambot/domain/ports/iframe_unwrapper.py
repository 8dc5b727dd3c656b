"""Port for unwrapping nested embed iframes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IframeUnwrapperPort(Protocol):
    """Follows nested ``<iframe src>`` links down to the innermost player page."""

    async def unwrap(self, url: str) -> str:
        """Return the deepest reachable URL.

        Never raises on network failure; returns the best URL known so far.
        """
        ...
