"""Global layout configuration and constants for the table engine."""

from __future__ import annotations

import os
from typing import Final

# Width heuristic (layout units, before unit conversion)
CONTAINER_BASE_WIDTH: Final = 365
MAX_AUTO_WIDTH: Final = 150
PER_CHAR_WIDTH: Final = 15
SPARSE_DEFAULT_WIDTH: Final = 100
DENSE_DEFAULT_WIDTH: Final = 50
DENSE_COLUMN_THRESHOLD: Final = 5  # tables with at least this many columns are "dense"

# Unit conversion
SIZE_MULTIPLIER: Final = 2  # design units -> device units
BASELINE_DPI: Final = 96.0
SIZE_SCALE: Final = float(os.environ.get("PINTABLE_SIZE_SCALE", "1.0"))

DEFAULT_CELL_ALIGN: Final = "center"
EMPTY_TEXT: Final = "No data"
