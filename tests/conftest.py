"""Shared fixtures for promwrite tests."""

import httpx
import pytest
import snappy
from prometheus_client import CollectorRegistry
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, UnknownMetricFamily

from promwrite import proto


class StaticCollector:
    """Registry collector that always returns the same families."""

    def __init__(self, *families):
        self.families = list(families)

    def collect(self):
        return self.families


def make_registry(*families) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(StaticCollector(*families))
    return registry


def decode_request(content: bytes):
    """Decompress and parse a remote-write request body."""
    return proto.Request.FromString(snappy.decompress(content))


def series_labels(symbols, ts) -> list[tuple[str, str]]:
    labels = [symbols[ref] for ref in ts.labels_refs]
    return list(zip(labels[::2], labels[1::2]))


@pytest.fixture
def mixed_families():
    """A gauge, a counter and an untyped family sharing label names."""
    gauge = GaugeMetricFamily("room_temperature", "Temperature per room", labels=["room", "floor"])
    gauge.add_metric(["kitchen", "1"], 21.5)
    gauge.add_metric(["office", "1"], 19.0)

    counter = CounterMetricFamily("http_requests", "HTTP requests served", labels=["code"])
    counter.add_metric(["200"], 42)

    untyped = UnknownMetricFamily("legacy_value", "", value=3)
    return [gauge, counter, untyped]


@pytest.fixture
def registry(mixed_families):
    return make_registry(*mixed_families)


class RecordingHandler:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 204, text: str = "", headers: dict | None = None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text, headers=self.headers)


@pytest.fixture
def recording_handler():
    return RecordingHandler()


@pytest.fixture
def mock_http_client(recording_handler):
    client = httpx.Client(transport=httpx.MockTransport(recording_handler))
    yield client
    client.close()
