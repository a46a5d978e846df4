"""Tests for loading and normalizing recorded trajectories."""

import asyncio
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from trajectory.errors import InvalidSampleError, TrajectoryLoadError
from trajectory.model import Sample
from trajectory.sample_store import (
    SampleStore,
    TrajectoryLoaderWorker,
    normalize_records,
    parse_timestamp,
)
from trajectory.sources import HttpJsonSource, JsonFileSource, source_for

RECORDS = [
    {"latitude": 17.3850, "longitude": 78.4866, "timestamp": 1700000000000},
    {"latitude": 17.3860, "longitude": 78.4876, "timestamp": 1700000060000},
    {"latitude": 17.3855, "longitude": 78.4870, "timestamp": 1700000030000},
]


class StaticSource:
    def __init__(self, payload):
        self.payload = payload
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        return self.payload


class FailingSource:
    async def fetch(self):
        raise TrajectoryLoadError("unreachable")


# ------------------ Normalization ------------------ #

def test_normalize_is_one_to_one_projection():
    trajectory = normalize_records(RECORDS)
    assert len(trajectory) == 3
    assert trajectory[0] == Sample(17.3850, 78.4866, 1700000000000)
    # Source order is kept even when timestamps go backwards
    assert [s.timestamp for s in trajectory] == [1700000000000, 1700000060000, 1700000030000]


def test_normalize_ignores_extra_fields():
    trajectory = normalize_records([{**RECORDS[0], "speed": 40, "heading": 90}])
    assert trajectory[0] == Sample(17.3850, 78.4866, 1700000000000)


def test_normalize_keeps_duplicates():
    assert len(normalize_records([RECORDS[0], RECORDS[0]])) == 2


def test_normalize_empty_list():
    assert normalize_records([]).is_empty


def test_normalize_rejects_non_list_payload():
    with pytest.raises(TrajectoryLoadError):
        normalize_records({"latitude": 1, "longitude": 2, "timestamp": 3})


@pytest.mark.parametrize("record, field", [
    ({"longitude": 78.0, "timestamp": 1}, "latitude"),
    ({"latitude": 17.0, "timestamp": 1}, "longitude"),
    ({"latitude": 17.0, "longitude": 78.0}, "timestamp"),
    ({"latitude": "north", "longitude": 78.0, "timestamp": 1}, "latitude"),
    ({"latitude": 17.0, "longitude": None, "timestamp": 1}, "longitude"),
    ({"latitude": 91.0, "longitude": 78.0, "timestamp": 1}, "latitude"),
    ({"latitude": 17.0, "longitude": -181.0, "timestamp": 1}, "longitude"),
    ({"latitude": True, "longitude": 78.0, "timestamp": 1}, "latitude"),
    ({"latitude": 17.0, "longitude": 78.0, "timestamp": "yesterday"}, "timestamp"),
])
def test_malformed_sample_is_tagged(record, field):
    with pytest.raises(InvalidSampleError) as excinfo:
        normalize_records([RECORDS[0], record])
    assert excinfo.value.index == 1
    assert excinfo.value.field == field
    assert "record 1" in str(excinfo.value)


def test_non_mapping_record():
    with pytest.raises(InvalidSampleError) as excinfo:
        normalize_records([[17.0, 78.0, 1]])
    assert excinfo.value.index == 0


def test_numeric_string_coordinates_are_accepted():
    trajectory = normalize_records([{"latitude": "17.5", "longitude": "78.25", "timestamp": "1000"}])
    assert trajectory[0] == Sample(17.5, 78.25, 1000)


# ------------------ Timestamps ------------------ #

def test_parse_timestamp_numbers():
    assert parse_timestamp(1700000000000) == 1700000000000
    assert parse_timestamp(1700000000000.0) == 1700000000000
    assert parse_timestamp("1700000000000") == 1700000000000


def test_parse_timestamp_iso_literals():
    assert parse_timestamp("1970-01-01T00:00:01Z") == 1000
    assert parse_timestamp("1970-01-01T00:00:01+00:00") == 1000
    assert parse_timestamp("1970-01-01T00:00:01") == 1000
    assert parse_timestamp("1970-01-01T01:00:00+01:00") == 0


@pytest.mark.parametrize("value", [True, None, [1], "not a time", float("nan")])
def test_parse_timestamp_rejects(value):
    with pytest.raises(InvalidSampleError):
        parse_timestamp(value)


# ------------------ Store ------------------ #

def test_store_loads_once():
    store = SampleStore()
    source = StaticSource(RECORDS)

    trajectory = asyncio.run(store.load(source))

    assert source.calls == 1
    assert store.is_loaded
    assert store.trajectory is trajectory
    assert len(trajectory) == 3


def test_store_failure_leaves_nothing_loaded(caplog):
    store = SampleStore()
    asyncio.run(store.load(StaticSource(RECORDS)))

    with caplog.at_level("ERROR"):
        result = asyncio.run(store.load(FailingSource()))

    assert result is None
    assert store.trajectory is None
    assert not store.is_loaded
    assert "Error loading route data" in caplog.text


def test_store_malformed_payload_fails_load():
    store = SampleStore()
    result = asyncio.run(store.load(StaticSource([{"latitude": "x", "longitude": 1, "timestamp": 1}])))
    assert result is None
    assert not store.is_loaded


def test_store_empty_payload_is_not_loaded():
    store = SampleStore()
    trajectory = asyncio.run(store.load(StaticSource([])))
    assert trajectory is not None and trajectory.is_empty
    assert not store.is_loaded


# ------------------ Sources ------------------ #

def test_json_file_source(tmp_path):
    path = tmp_path / "route.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")

    records = asyncio.run(JsonFileSource(str(path)).fetch())
    assert records == RECORDS


def test_json_file_source_missing(tmp_path):
    with pytest.raises(TrajectoryLoadError):
        asyncio.run(JsonFileSource(str(tmp_path / "nope.json")).fetch())


def test_json_file_source_bad_json(tmp_path):
    path = tmp_path / "route.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(TrajectoryLoadError):
        asyncio.run(JsonFileSource(str(path)).fetch())


def test_store_rejects_file_that_is_not_utf8(tmp_path):
    path = tmp_path / "route.json"
    path.write_bytes(b'[{"latitude": 1, "longitude": 2, "timestamp": "\xff\xfe"}]')
    store = SampleStore()

    result = asyncio.run(store.load(JsonFileSource(str(path))))

    assert result is None
    assert store.is_loaded is False


def test_source_for():
    assert isinstance(source_for("https://example.com/route.json"), HttpJsonSource)
    assert isinstance(source_for("http://example.com/route.json"), HttpJsonSource)
    assert isinstance(source_for("data/dummy-route.json"), JsonFileSource)


def _serve(handler, path="/dummy-route.json"):
    async def scenario():
        app = web.Application()
        app.router.add_get(path, handler)
        async with TestServer(app) as server:
            source = HttpJsonSource(str(server.make_url(path)), timeout=5.0)
            return await source.fetch()

    return asyncio.run(scenario())


def test_http_source_fetches_records():
    async def handler(request):
        return web.json_response(RECORDS)

    assert _serve(handler) == RECORDS


def test_http_source_non_200():
    async def handler(request):
        return web.Response(status=404, text="missing")

    with pytest.raises(TrajectoryLoadError, match="404"):
        _serve(handler)


def test_http_source_invalid_json():
    async def handler(request):
        return web.Response(text="<html>", content_type="text/html")

    with pytest.raises(TrajectoryLoadError, match="not valid JSON"):
        _serve(handler)


def test_http_source_undecodable_body():
    async def handler(request):
        return web.Response(
            body=b'[{"latitude": "\xff\xfe"}]',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )

    with pytest.raises(TrajectoryLoadError, match="could not be decoded"):
        _serve(handler)


# ------------------ Loader worker ------------------ #

def test_loader_worker_emits_trajectory(qapp):
    worker = TrajectoryLoaderWorker(StaticSource(RECORDS))
    loaded, failed = [], []
    worker.trajectory_loaded.connect(lambda trajectory: loaded.append(trajectory))
    worker.load_failed.connect(lambda message: failed.append(message))

    worker.run()

    assert failed == []
    assert len(loaded) == 1
    assert len(loaded[0]) == 3
    assert worker.store.is_loaded


def test_loader_worker_reports_failure(qapp):
    worker = TrajectoryLoaderWorker(FailingSource())
    loaded, failed = [], []
    worker.trajectory_loaded.connect(lambda trajectory: loaded.append(trajectory))
    worker.load_failed.connect(lambda message: failed.append(message))

    worker.run()

    assert loaded == []
    assert len(failed) == 1


def test_loader_worker_reports_empty_recording(qapp):
    worker = TrajectoryLoaderWorker(StaticSource([]))
    loaded, empty, failed = [], [], []
    worker.trajectory_loaded.connect(lambda trajectory: loaded.append(trajectory))
    worker.trajectory_empty.connect(lambda message: empty.append(message))
    worker.load_failed.connect(lambda message: failed.append(message))

    worker.run()

    assert loaded == []
    assert failed == []
    assert len(empty) == 1
    assert "No samples" in empty[0]
