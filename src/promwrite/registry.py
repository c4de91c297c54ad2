"""Registry adapter - turns prometheus_client families into raw metrics."""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import logging

from prometheus_client.registry import Collector as RegistryCollector

logger = logging.getLogger(__name__)


# Family types whose samples map onto a single value kind
COUNTER_TYPES = {"counter"}
GAUGE_TYPES = {"gauge"}
UNTYPED_TYPES = {"unknown", "untyped"}


@dataclass(frozen=True)
class MetricDesc:
    """Descriptor of one metric: name, help text and declared label names."""

    name: str
    help: str = ""
    label_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class RawMetric:
    """
    A single metric as read from the registry.

    Exactly one of ``counter``, ``gauge`` and ``untyped`` is expected to be
    set. The collector rejects metrics where that does not hold.
    """

    desc: MetricDesc
    labels: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    counter: Optional[float] = None
    gauge: Optional[float] = None
    untyped: Optional[float] = None

    def populated(self) -> list[tuple[str, float]]:
        """Return the ``(kind, value)`` pairs that are set."""
        kinds = (("counter", self.counter), ("gauge", self.gauge), ("untyped", self.untyped))
        return [(kind, value) for kind, value in kinds if value is not None]


def metrics_from_registry(registry: RegistryCollector) -> Iterator[RawMetric]:
    """
    Stream every sample currently held by ``registry`` as a RawMetric.

    Counter families carry ``_created`` companion samples holding creation
    timestamps; those are not values and are skipped. Families of any type
    other than counter, gauge or untyped yield metrics with no value set.
    """
    for family in registry.collect():
        for sample in family.samples:
            if family.type in COUNTER_TYPES and sample.name.endswith("_created"):
                continue

            labels = tuple((str(k), str(v)) for k, v in sample.labels.items())
            desc = MetricDesc(
                name=sample.name,
                help=family.documentation or "",
                label_names=tuple(name for name, _ in labels),
            )
            value = float(sample.value)

            if family.type in COUNTER_TYPES:
                yield RawMetric(desc=desc, labels=labels, counter=value)
            elif family.type in GAUGE_TYPES:
                yield RawMetric(desc=desc, labels=labels, gauge=value)
            elif family.type in UNTYPED_TYPES:
                yield RawMetric(desc=desc, labels=labels, untyped=value)
            else:
                logger.debug(f"Family {family.name} has unsupported type {family.type}")
                yield RawMetric(desc=desc, labels=labels)
