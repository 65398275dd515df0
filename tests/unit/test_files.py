"""
Unit tests for file access helpers.
"""

import io

import pytest

from httpreply.io.files import BoundedReader, file_size, open_bounded, open_full


class TestFileHelpers:
    """Tests for file_size, open_full and open_bounded."""

    def test_file_size(self, sample_file, empty_file):
        assert file_size(sample_file) == 1000
        assert file_size(str(empty_file)) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            file_size(tmp_path / "missing.bin")
        with pytest.raises(FileNotFoundError):
            open_bounded(tmp_path / "missing.bin", 0, 1)

    def test_open_full(self, sample_file, sample_data):
        with open_full(sample_file) as stream:
            assert stream.read() == sample_data

    def test_open_bounded(self, sample_file, sample_data):
        with open_bounded(sample_file, 250, 100) as reader:
            assert reader.read() == sample_data[250:350]
            assert reader.read() == b""
        assert reader.closed


class TestBoundedReader:
    """Tests for BoundedReader."""

    def test_read_stops_at_length(self):
        reader = BoundedReader(io.BytesIO(b"0123456789"), 4)

        assert reader.read(3) == b"012"
        assert reader.remaining == 1
        assert reader.read(3) == b"3"
        assert reader.read(3) == b""

    def test_iter_chunks(self):
        reader = BoundedReader(io.BytesIO(b"0123456789"), 7)

        assert list(reader.iter_chunks(3)) == [b"012", b"345", b"6"]

    def test_short_underlying_stream(self):
        """EOF of the wrapped stream ends the reader early."""
        reader = BoundedReader(io.BytesIO(b"abc"), 10)

        assert reader.read() == b"abc"
        assert reader.read() == b""

    def test_zero_length(self):
        assert BoundedReader(io.BytesIO(b"abc"), 0).read() == b""

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            BoundedReader(io.BytesIO(b"abc"), -1)

    def test_close_closes_wrapped_stream(self):
        raw = io.BytesIO(b"abc")
        reader = BoundedReader(raw, 3)
        reader.close()

        assert raw.closed
        assert reader.closed
