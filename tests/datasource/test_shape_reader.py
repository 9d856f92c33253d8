"""Tests for record decoding and dataset discovery."""

import pickle

import pytest

from tileplot.abstractions.types import BoundingBox
from tileplot.datasource import ShapeSource, decode_record
from tileplot.exceptions import DatasetNotFoundError, ShapeDecodeError
from tileplot.rendering.shapes import Point, Polygon, Rectangle, ShapeKind, ValuedPoint


class TestDecodeRecord:

    def test_point(self):
        assert decode_record("1.5, -2\n", ShapeKind.POINT) == Point(1.5, -2.0)

    def test_rectangle(self):
        assert decode_record("0,0,4,3", ShapeKind.RECTANGLE) == Rectangle(0, 0, 4, 3)

    def test_valued_point(self):
        assert decode_record("1,2,42.5", ShapeKind.VALUED_POINT) == ValuedPoint(1, 2, 42.5)

    def test_polygon_coordinates(self):
        shape = decode_record("0,0,4,0,4,4", ShapeKind.POLYGON)
        assert shape == Polygon(((0, 0), (4, 0), (4, 4)))

    def test_polygon_wkt(self):
        shape = decode_record("POLYGON ((0 0, 4 0, 4 4, 0 0))", ShapeKind.POLYGON)
        assert shape == Polygon(((0, 0), (4, 0), (4, 4)))

    def test_empty_wkt_polygon(self):
        shape = decode_record("POLYGON EMPTY", ShapeKind.POLYGON)
        assert shape.bounding_box() is None

    def test_blank_and_comment_lines(self):
        assert decode_record("   \n", ShapeKind.POINT) is None
        assert decode_record("# x,y", ShapeKind.POINT) is None

    @pytest.mark.parametrize("line,kind", [
        ("1", ShapeKind.POINT),
        ("a,b", ShapeKind.POINT),
        ("0,0,1", ShapeKind.RECTANGLE),
        ("1,2", ShapeKind.VALUED_POINT),
        ("0,0,1", ShapeKind.POLYGON),
        ("POLYGON ((0 0, 1", ShapeKind.POLYGON),
        ("POINT (1 1)", ShapeKind.POLYGON),
    ])
    def test_malformed(self, line, kind):
        with pytest.raises(ShapeDecodeError):
            decode_record(line, kind)

    @pytest.mark.parametrize("line,kind", [
        ("nan,2", ShapeKind.POINT),
        ("inf,2", ShapeKind.POINT),
        ("0,0,-inf,1", ShapeKind.RECTANGLE),
        ("1,2,nan", ShapeKind.VALUED_POINT),
        ("0,0,4,0,inf,4", ShapeKind.POLYGON),
    ])
    def test_non_finite_coordinates(self, line, kind):
        with pytest.raises(ShapeDecodeError, match="Non-finite"):
            decode_record(line, kind)


class TestShapeSource:

    def test_single_file(self, write_dataset):
        path = write_dataset("points.csv", ["# header", "1,1", "", "2,3"])
        source = ShapeSource(path, "point")

        assert source.files() == [path]
        assert not source.is_split()
        assert list(source.iter_shapes()) == [Point(1, 1), Point(2, 3)]
        assert source.total_size() == path.stat().st_size

    def test_directory_skips_hidden_and_underscore_files(self, write_dataset, tmp_path):
        write_dataset("data/part-1", ["1,1"])
        write_dataset("data/part-0", ["0,0"])
        write_dataset("data/_master.grid", ["junk"])
        write_dataset("data/.part-0.crc", ["junk"])
        source = ShapeSource(tmp_path / "data", ShapeKind.POINT)

        assert [p.name for p in source.files()] == ["part-0", "part-1"]
        assert source.is_split()
        assert list(source.iter_shapes()) == [Point(0, 0), Point(1, 1)]

    def test_glob_pattern(self, write_dataset, tmp_path):
        write_dataset("a.csv", ["1,1"])
        write_dataset("b.csv", ["2,2"])
        write_dataset("c.txt", ["3,3"])
        source = ShapeSource(str(tmp_path / "*.csv"), "point")

        assert source.is_pattern
        assert source.is_split()
        assert [p.name for p in source.files()] == ["a.csv", "b.csv"]

    def test_missing_input(self, tmp_path):
        source = ShapeSource(tmp_path / "nope.csv", "point")
        assert not source.exists()
        with pytest.raises(DatasetNotFoundError):
            source.files()

    def test_pattern_without_matches(self, tmp_path):
        with pytest.raises(DatasetNotFoundError):
            ShapeSource(str(tmp_path / "*.csv"), "point").files()

    def test_region_filter(self, write_dataset):
        path = write_dataset("rects.csv", ["0,0,1,1", "5,5,6,6", "9,9,20,20"])
        source = ShapeSource(path, "rectangle")
        shapes = list(source.iter_shapes(BoundingBox(4, 4, 10, 10)))
        assert shapes == [Rectangle(5, 5, 6, 6), Rectangle(9, 9, 20, 20)]

    def test_decode_error_reports_location(self, write_dataset):
        path = write_dataset("bad.csv", ["1,1", "2,oops"])
        source = ShapeSource(path, "point")
        with pytest.raises(ShapeDecodeError) as exc_info:
            list(source.iter_shapes())
        assert exc_info.value.line_number == 2
        assert exc_info.value.source == str(path)
        assert f"{path}:2:" in str(exc_info.value)

    def test_picklable(self, write_dataset):
        source = ShapeSource(write_dataset("p.csv", ["1,1"]), "valuedPoint")
        restored = pickle.loads(pickle.dumps(source))
        assert restored.path == source.path
        assert restored.shape_kind is ShapeKind.VALUED_POINT

    def test_invalid_utf8_reports_location(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"1,1\n\xff\xfe,2\n3,3\n")
        source = ShapeSource(path, "point")
        with pytest.raises(ShapeDecodeError) as exc_info:
            list(source.iter_shapes())
        assert exc_info.value.line_number == 2
        assert isinstance(exc_info.value.original_exception, UnicodeDecodeError)

    def test_crlf_records(self, tmp_path):
        path = tmp_path / "windows.csv"
        path.write_bytes(b"1,1\r\n2,3\r\n")
        assert list(ShapeSource(path, "point").iter_shapes()) == [Point(1, 1), Point(2, 3)]

    def test_decode_error_survives_pickling(self, tmp_path):
        error = ShapeDecodeError("bad field", tmp_path / "a.csv", 7, ValueError("x"))
        restored = pickle.loads(pickle.dumps(error))
        assert str(restored) == str(error)
        assert restored.line_number == 7
        assert restored.source == error.source
