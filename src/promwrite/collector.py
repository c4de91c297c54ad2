"""Collector - drains a registry into one remote-write batch."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable

from prometheus_client.registry import Collector as RegistryCollector

from . import proto
from .errors import InvalidMetricDescError, UnknownMetricTypeError
from .registry import RawMetric, metrics_from_registry
from .symbols import SymbolTable

logger = logging.getLogger(__name__)

# Labels the collector always sets itself
RESERVED_LABELS = ("__name__", "instance", "job")

_METRIC_TYPES = {
    "counter": proto.MetricType.COUNTER,
    "gauge": proto.MetricType.GAUGE,
    "untyped": proto.MetricType.UNSPECIFIED,
}


@dataclass
class Batch:
    """The symbols and time series produced by one collection pass."""

    symbols: list[str] = field(default_factory=list)
    timeseries: list = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return sum(len(ts.samples) for ts in self.timeseries)

    def to_request(self):
        """Build the ``io.prometheus.write.v2.Request`` message."""
        return proto.Request(symbols=self.symbols, timeseries=self.timeseries)

    def serialize(self) -> bytes:
        return self.to_request().SerializeToString()

    def __len__(self) -> int:
        return len(self.timeseries)


class Collector:
    """
    Converts the metrics of a registry into wire time series.

    Collection is all-or-nothing: a single metric that has no name or no
    usable value aborts the whole batch.
    """

    def __init__(
        self,
        instance: str,
        job: str,
        clock: Callable[[], float] = time.time,
    ):
        self.instance = instance
        self.job = job
        self._clock = clock

    def collect(self, registry: RegistryCollector) -> Batch:
        """Collect every metric currently registered in ``registry``."""
        return self.collect_metrics(metrics_from_registry(registry))

    def collect_metrics(self, metrics: Iterable[RawMetric]) -> Batch:
        """Build a batch from already enumerated raw metrics."""
        symbols = SymbolTable()
        batch = Batch()

        for metric in metrics:
            batch.timeseries.append(self._convert(metric, symbols))

        batch.symbols = symbols.symbols()
        logger.debug(f"Collected {len(batch)} series with {len(batch.symbols)} symbols")
        return batch

    def _convert(self, metric: RawMetric, symbols: SymbolTable):
        desc = metric.desc
        name = getattr(desc, "name", None)
        if not name:
            raise InvalidMetricDescError(desc)
        help_text = getattr(desc, "help", None) or ""

        labels = self.build_labels(name, metric.labels)

        populated = metric.populated()
        if len(populated) != 1:
            raise UnknownMetricTypeError(name, len(populated))
        kind, value = populated[0]

        return proto.TimeSeries(
            metadata=proto.Metadata(
                type=int(_METRIC_TYPES[kind]),
                help_ref=symbols.intern(help_text),
            ),
            labels_refs=symbols.intern_labels(labels),
            samples=[
                proto.Sample(value=value, timestamp=int(self._clock() * 1000)),
            ],
        )

    def build_labels(self, name: str, metric_labels: Iterable[tuple[str, str]]) -> list[str]:
        """
        Return the flat label list for one series.

        ``__name__``, ``instance`` and ``job`` come first and take precedence;
        metric labels with those names are dropped, the rest keep their order.
        """
        labels = ["__name__", name, "instance", self.instance, "job", self.job]
        for label_name, label_value in metric_labels:
            if label_name in RESERVED_LABELS:
                continue
            labels.extend((label_name, label_value))
        return labels
