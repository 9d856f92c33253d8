"""Dataset access and pre-plot statistics."""

from .shape_reader import ShapeSource, decode_record
from .statistics import compute_dataset_mbr, compute_value_range

__all__ = [
    'ShapeSource',
    'decode_record',
    'compute_dataset_mbr',
    'compute_value_range',
]
