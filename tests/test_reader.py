"""Tests for the bounded incremental reader and async model loading."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from ifcquant.config import CHUNK_SIZE, MAX_READ_BYTES, ReaderSettings
from ifcquant.extraction.pipeline import load_model, parse_content
from ifcquant.parsing.reader import (
    IncrementalReader,
    NoEntitiesFoundError,
    SourceReadError,
    decode,
    read_prefix,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

FILLER_LINE = "FILLER;\n"


def _walls(count: int, start: int = 1) -> str:
    return "".join(f"#{i}=IFCWALL('W{i}',3000,200);\n" for i in range(start, start + count))


def _padding(num_bytes: int) -> str:
    return FILLER_LINE * (num_bytes // len(FILLER_LINE) + 1)


def _parse(text: str, keep_tail: bool):
    return parse_content(text, keep_tail)


def _read(source, settings: ReaderSettings | None = None, parse=_parse):
    return asyncio.run(IncrementalReader(settings).read(source, parse))


# ---------------------------------------------------------------------------
# Prefix reads
# ---------------------------------------------------------------------------

class TestReadPrefix:

    def test_bytes_source(self):
        data, total = asyncio.run(read_prefix(b"abcdef", 4))
        assert data == b"abcd"
        assert total == 6

    def test_file_source(self, tmp_path: Path):
        path = tmp_path / "model.ifc"
        path.write_bytes(b"0123456789")
        data, total = asyncio.run(read_prefix(path, 3))
        assert data == b"012"
        assert total == 10

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SourceReadError):
            asyncio.run(read_prefix(tmp_path / "missing.ifc", 10))

    def test_decode_drops_cut_character(self):
        data = "#1=IFCWALL('Wand ä');".encode("utf-8")
        cut = data[: data.index("ä".encode("utf-8")) + 1]
        assert decode(cut).endswith("Wand ")

    def test_decode_strips_bom(self):
        data = "\ufeff#1=IFCWALL('W');".encode("utf-8")
        assert decode(data) == "#1=IFCWALL('W');"


# ---------------------------------------------------------------------------
# Growth policy
# ---------------------------------------------------------------------------

class TestIncrementalReader:

    def test_small_file_read_once(self):
        result = _read(_walls(3).encode())
        assert len(result.elements) == 3
        assert result.truncated is False

    def test_stops_once_threshold_met(self):
        data = _walls(200).encode()
        settings = ReaderSettings(chunk_size=1000, max_bytes=10_000, min_elements=10)
        result = _read(data, settings)
        assert result.truncated is True
        assert result.bytes_read == 1000
        assert 10 <= len(result.elements) < 200

    def test_truncated_tail_not_parsed(self):
        data = _walls(200).encode()
        settings = ReaderSettings(chunk_size=1000, max_bytes=10_000, min_elements=10)
        result = _read(data, settings)
        text = data[:1000].decode()
        complete = text.count(";")
        assert len(result.elements) == complete
        assert all(e.properties["thickness"] == 200.0 for e in result.elements)

    def test_grows_past_empty_prefix(self):
        text = _padding(CHUNK_SIZE + 50_000) + _walls(20)
        result = _read(text.encode())
        assert len(result.elements) == 20
        assert result.truncated is False
        assert result.bytes_read == len(text.encode())

    def test_grows_window_by_chunk(self):
        text = _padding(CHUNK_SIZE * 2 + 10) + _walls(20) + _padding(CHUNK_SIZE * 3)
        windows: list[int] = []

        def parse(text_window: str, keep_tail: bool):
            windows.append(len(text_window))
            return parse_content(text_window, keep_tail)

        result = _read(text.encode(), parse=parse)
        assert windows == [CHUNK_SIZE, CHUNK_SIZE * 2, CHUNK_SIZE * 3]
        assert len(result.elements) == 20
        assert result.truncated is True

    def test_stops_at_cap(self):
        text = _padding(MAX_READ_BYTES * 2) + _walls(20)
        calls: list[int] = []

        def parse(text_window: str, keep_tail: bool):
            calls.append(len(text_window))
            return parse_content(text_window, keep_tail)

        with pytest.raises(NoEntitiesFoundError):
            _read(text.encode(), parse=parse)
        assert calls[-1] == MAX_READ_BYTES
        assert len(calls) == 6

    def test_sparse_file_returns_what_it_found(self):
        text = _walls(4) + _padding(MAX_READ_BYTES * 2) + _walls(20, start=100)
        result = _read(text.encode())
        assert [e.id for e in result.elements] == ["1", "2", "3", "4"]
        assert result.bytes_read == MAX_READ_BYTES
        assert result.truncated is True

    def test_no_entities(self):
        text = "ISO-10303-21;\nHEADER;\nENDSEC;\nDATA;\nENDSEC;\nEND-ISO-10303-21;\n"
        with pytest.raises(NoEntitiesFoundError):
            _read(text.encode())

    def test_empty_source(self):
        with pytest.raises(NoEntitiesFoundError):
            _read(b"")

    def test_file_path(self, tmp_path: Path):
        path = tmp_path / "walls.ifc"
        path.write_text(_walls(12), encoding="utf-8")
        result = _read(path)
        assert len(result.elements) == 12

    def test_unreadable_file(self, tmp_path: Path):
        with pytest.raises(SourceReadError):
            _read(tmp_path / "nope.ifc")

    def test_rejects_zero_chunk(self):
        with pytest.raises(ValueError):
            IncrementalReader(ReaderSettings(chunk_size=0))


# ---------------------------------------------------------------------------
# load_model
# ---------------------------------------------------------------------------

class TestLoadModel:

    def test_builds_model(self):
        text = _walls(5) + "#50=IFCDOOR('D1');\n#51=IFCSPACE('R1',20,60);\n"
        model = asyncio.run(load_model(text.encode()))
        assert len(model.elements) == 7
        assert model.quantities.by_type["IFCWALL"].count == 5
        assert model.quantities.by_type["IFCDOOR"].total_area == pytest.approx(1.68)
        assert [len(lvl.elements) for lvl in model.levels] == [3, 2, 2]
        assert model.truncated is False
        assert model.bytes_read == len(text.encode())

    def test_level_cycle_restarts_per_window(self):
        text = _padding(CHUNK_SIZE + 10) + _walls(3)
        model = asyncio.run(load_model(text.encode()))
        assert [e.level for e in model.elements] == ["Ground Floor", "First Floor", "Second Floor"]

    def test_volume_overrides(self):
        model = asyncio.run(load_model(_walls(3).encode(), volume_overrides={"2": 4.5}))
        assert model.elements[1].properties["volume"] == 4.5
        assert model.quantities.by_type["IFCWALL"].total_volume == pytest.approx(4.5)

    def test_no_entities(self):
        with pytest.raises(NoEntitiesFoundError):
            asyncio.run(load_model(b"HEADER;ENDSEC;"))

    def test_bom_before_first_entity(self, tmp_path: Path):
        path = tmp_path / "bom.ifc"
        path.write_text("\ufeff#1=IFCWALL('W',3000,200);\n#2=IFCDOOR('D');\n", encoding="utf-8")
        model = asyncio.run(load_model(path))
        assert [e.id for e in model.elements] == ["1", "2"]
