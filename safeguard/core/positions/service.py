from __future__ import annotations

from safeguard.core.positions.models import Position
from safeguard.core.positions.ports import PositionsPort


class PositionsService:
    def __init__(self, port: PositionsPort) -> None:
        self._port = port

    async def list_positions(self) -> list[Position]:
        positions = await self._port.list_positions()
        return [position for position in positions if position.symbol]
