"""
Tiled plotting for large spatial datasets.

This package renders points, rectangles, polygons and value-bearing points
into a single raster image by partitioning world space into a grid,
rendering every grid cell independently and compositing the tiles.
"""

__version__ = "1.0.0"
__description__ = "Grid-partitioned parallel rendering of spatial datasets"

# Note: Modules should be imported explicitly when needed to avoid
# side effects like loading configuration on import.

__all__ = [
    '__version__',
    '__description__',
]
