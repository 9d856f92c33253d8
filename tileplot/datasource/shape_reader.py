"""Line-oriented shape datasets on the local file system.

Records are comma separated, one shape per line::

    point           x,y
    rectangle       x1,y1,x2,y2
    valued_point    x,y,value
    polygon         x1,y1,x2,y2,...,xn,yn   or   POLYGON ((x y, ...))

Blank lines and lines starting with ``#`` are ignored.
"""

import glob
import logging
import math
from pathlib import Path
from typing import Iterator, List, Optional, Union

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import Polygon as ShapelyPolygon

from ..abstractions.types import BoundingBox
from ..exceptions import DatasetNotFoundError, ShapeDecodeError
from ..rendering.shapes import Point, Polygon, Rectangle, Shape, ShapeKind, ValuedPoint

logger = logging.getLogger(__name__)

GLOB_CHARS = set('*?[')


def _floats(fields: List[str]) -> List[float]:
    try:
        values = [float(f) for f in fields]
    except ValueError as e:
        raise ShapeDecodeError(f"Non-numeric field in record: {e}", original_exception=e)
    for field, value in zip(fields, values):
        if not math.isfinite(value):
            raise ShapeDecodeError(f"Non-finite field in record: {field.strip()!r}")
    return values


def _decode_polygon(text: str) -> Polygon:
    if text[:1].isalpha():
        try:
            geometry = wkt.loads(text)
        except ShapelyError as e:
            raise ShapeDecodeError(f"Invalid WKT: {e}", original_exception=e)
        if not isinstance(geometry, ShapelyPolygon):
            raise ShapeDecodeError(f"Unsupported geometry type {geometry.geom_type}")
        if geometry.is_empty:
            return Polygon(())
        coords = list(geometry.exterior.coords)
        if len(coords) > 1 and coords[0] == coords[-1]:
            coords = coords[:-1]
        vertices = tuple((float(x), float(y)) for x, y, *_ in coords)
        if not all(math.isfinite(c) for vertex in vertices for c in vertex):
            raise ShapeDecodeError("Non-finite coordinate in WKT polygon")
        return Polygon(vertices)

    values = _floats(text.split(','))
    if len(values) % 2:
        raise ShapeDecodeError(f"Polygon needs an even number of coordinates, got {len(values)}")
    return Polygon(tuple(zip(values[0::2], values[1::2])))


def decode_record(line: str, shape_kind: ShapeKind) -> Optional[Shape]:
    """Decode one text record; returns None for blank and comment lines."""
    text = line.strip()
    if not text or text.startswith('#'):
        return None

    if shape_kind is ShapeKind.POLYGON:
        return _decode_polygon(text)

    values = _floats(text.split(','))
    if shape_kind is ShapeKind.POINT:
        if len(values) < 2:
            raise ShapeDecodeError(f"Point needs 2 coordinates, got {len(values)}")
        return Point(values[0], values[1])
    if shape_kind is ShapeKind.RECTANGLE:
        if len(values) < 4:
            raise ShapeDecodeError(f"Rectangle needs 4 coordinates, got {len(values)}")
        return Rectangle(values[0], values[1], values[2], values[3])
    if shape_kind is ShapeKind.VALUED_POINT:
        if len(values) < 3:
            raise ShapeDecodeError(f"Valued point needs x,y,value, got {len(values)} fields")
        return ValuedPoint(values[0], values[1], values[2])
    raise ShapeDecodeError(f"Unsupported shape kind {shape_kind}")


class ShapeSource:
    """Picklable descriptor of a dataset: a file, a directory or a glob pattern.

    Each call to iter_shapes() reopens the files, so every render task can
    stream the dataset independently.
    """

    def __init__(self, path: Union[str, Path], shape_kind: Union[str, ShapeKind]):
        self.path = str(path)
        self.shape_kind = ShapeKind.parse(shape_kind)

    @property
    def is_pattern(self) -> bool:
        return any(c in GLOB_CHARS for c in self.path) and not Path(self.path).exists()

    def exists(self) -> bool:
        try:
            return bool(self.files())
        except DatasetNotFoundError:
            return False

    def files(self) -> List[Path]:
        """Data files making up the dataset, in a stable order."""
        path = Path(self.path)
        if path.is_file():
            return [path]
        if path.is_dir():
            return sorted(
                p for p in path.iterdir()
                if p.is_file() and not p.name.startswith(('_', '.'))
            )
        if self.is_pattern:
            matches = sorted(Path(p) for p in glob.glob(self.path) if Path(p).is_file())
            if matches:
                return matches
            raise DatasetNotFoundError(f"Pattern {self.path} matches no files")
        raise DatasetNotFoundError(f"Input {self.path} does not exist")

    def total_size(self) -> int:
        """Combined size in bytes of all data files."""
        return sum(p.stat().st_size for p in self.files())

    def is_split(self) -> bool:
        """True when the dataset spans more than a single plain file."""
        return Path(self.path).is_dir() or self.is_pattern or len(self.files()) > 1

    def iter_shapes(self, region: Optional[BoundingBox] = None) -> Iterator[Shape]:
        """Lazily decode every shape, optionally only those intersecting region."""
        for file_path in self.files():
            yield from self._iter_file(file_path, region)

    def _iter_file(self, file_path: Path, region: Optional[BoundingBox]) -> Iterator[Shape]:
        with open(file_path, 'rb') as handle:
            for line_number, raw in enumerate(handle, start=1):
                try:
                    line = raw.decode('utf-8')
                except UnicodeDecodeError as e:
                    raise ShapeDecodeError(f"Record is not valid UTF-8: {e}",
                                           file_path, line_number, e) from e
                try:
                    shape = decode_record(line, self.shape_kind)
                except ShapeDecodeError as e:
                    raise ShapeDecodeError(str(e), file_path, line_number,
                                           e.original_exception or e) from e
                if shape is None:
                    continue
                if region is not None:
                    bbox = shape.bounding_box()
                    if bbox is None or not bbox.intersects(region):
                        continue
                yield shape

    def __repr__(self) -> str:
        return f"ShapeSource({self.path!r}, {self.shape_kind.value!r})"
