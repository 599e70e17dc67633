from __future__ import annotations

from typing import Protocol

from safeguard.core.positions.models import Position


class PositionsPort(Protocol):
    async def list_positions(self) -> list[Position]:
        """Return the open positions of the configured account."""
        raise NotImplementedError
