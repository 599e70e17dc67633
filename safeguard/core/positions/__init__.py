"""Position domain types and services."""

from safeguard.core.positions.models import Position, PositionSide
from safeguard.core.positions.ports import PositionsPort
from safeguard.core.positions.service import PositionsService

__all__ = [
    "Position",
    "PositionSide",
    "PositionsPort",
    "PositionsService",
]
