"""Dataset scans used before partitioning: extent and value range."""

import math
from typing import Optional

from ..abstractions.types import BoundingBox, MutableBoundingBox, ValueRange
from ..exceptions import EmptyDatasetError
from ..infrastructure.logging import get_logger, log_operation
from ..rendering.shapes import ValuedPoint
from .shape_reader import ShapeSource

logger = get_logger(__name__)

UNIT_BOX = BoundingBox(0.0, 0.0, 1.0, 1.0)


@log_operation("dataset_mbr_scan")
def compute_dataset_mbr(source: ShapeSource, region: Optional[BoundingBox] = None) -> BoundingBox:
    """Union of the bounding boxes of every shape in the dataset.

    An empty dataset yields the unit box so the plot still produces a
    (blank) image.
    """
    accumulator = MutableBoundingBox()
    count = 0
    for shape in source.iter_shapes(region):
        bbox = shape.bounding_box()
        if bbox is None:
            continue
        accumulator.add(bbox)
        count += 1

    mbr = accumulator.to_bounding_box()
    if mbr is None:
        logger.warning(f"No shapes with spatial extent in {source}; using unit MBR")
        return UNIT_BOX
    logger.info(f"Dataset MBR over {count} shapes: {mbr}")
    return mbr


@log_operation("value_range_scan")
def compute_value_range(source: ShapeSource, region: Optional[BoundingBox] = None) -> ValueRange:
    """Min and max of valued-point values, widened to integers."""
    lo = math.inf
    hi = -math.inf
    for shape in source.iter_shapes(region):
        if isinstance(shape, ValuedPoint):
            lo = min(lo, shape.value)
            hi = max(hi, shape.value)

    if lo is math.inf:
        raise EmptyDatasetError(f"Dataset {source} carries no values")
    value_range = ValueRange(math.floor(lo), math.ceil(hi))
    logger.info(f"Dataset value range: {value_range}")
    return value_range
