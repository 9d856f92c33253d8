"""Grid systems for partitioning world space."""

from .partition_grid import GridSpec, CellInfo, CellId

__all__ = ['GridSpec', 'CellInfo', 'CellId']
