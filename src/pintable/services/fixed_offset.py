"""Pinning offsets for fixed columns.

A left-fixed column sits flush against the columns before it, so its offset
from the left edge is the summed width of every column at a lower index. A
right-fixed column mirrors this from the right edge over the columns after it.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pintable.models import FixedSide

__all__ = ["fixed_offset", "fixed_offsets"]


def fixed_offset(side: FixedSide, index: int, widths: Sequence[float]) -> Optional[float]:
    """Offset of column ``index`` pinned to ``side``; ``None`` when not pinned."""
    side = FixedSide.coerce(side)
    if side is FixedSide.NONE:
        return None
    total = 0.0
    if side is FixedSide.LEFT:
        for i, width in enumerate(widths):
            if i >= index:
                break
            total += width
    else:
        for i in range(len(widths) - 1, index, -1):
            total += widths[i]
    return total


def fixed_offsets(sides: Sequence[FixedSide], widths: Sequence[float]) -> list[Optional[float]]:
    return [fixed_offset(side, i, widths) for i, side in enumerate(sides)]
