from __future__ import annotations

# =============================================================================
# PATTERN IDENTITY
# =============================================================================

# Integer identity of one exemplar cell's pattern. Assigned in exemplar scan
# order by the PatternRegistry and never changed afterwards.
PatternId = int

# =============================================================================
# GRID COORDINATES (Always integers)
# =============================================================================

GridCoord = int  # Always integer cell position along one axis

# Position of a cell in a 3D grid, ordered (x, y, z).
Coord3D = tuple[GridCoord, GridCoord, GridCoord]  # Example: (2, 0, 5)

# Extents of a 3D grid, ordered (size_x, size_y, size_z).
GridShape = tuple[int, int, int]  # Example: (8, 4, 8)

# =============================================================================
# RANDOMNESS
# =============================================================================

RandomSeed = int | str | None
