"""promwrite - push prometheus_client registries over Prometheus remote-write 2.0."""

__version__ = "0.1.0"

from .client import DEFAULT_JOB, WriteClient, default_instance
from .collector import Batch, Collector
from .errors import (
    ClientAlreadyRunningError,
    CollectionError,
    ConfigurationError,
    InvalidEndpointError,
    InvalidMetricDescError,
    MissingAuthCredentialsError,
    MissingEndpointError,
    MissingInstanceError,
    MissingJobError,
    MissingRegistryError,
    PromWriteError,
    RemoteWriteFailedError,
    UnknownMetricTypeError,
)
from .registry import MetricDesc, RawMetric
from .symbols import SymbolTable
from .transport import RemoteWriteTransport, WriteStats

__all__ = [
    "__version__",
    "WriteClient",
    "DEFAULT_JOB",
    "default_instance",
    "Batch",
    "Collector",
    "MetricDesc",
    "RawMetric",
    "SymbolTable",
    "RemoteWriteTransport",
    "WriteStats",
    "PromWriteError",
    "ConfigurationError",
    "MissingEndpointError",
    "MissingInstanceError",
    "MissingJobError",
    "MissingRegistryError",
    "MissingAuthCredentialsError",
    "InvalidEndpointError",
    "CollectionError",
    "InvalidMetricDescError",
    "UnknownMetricTypeError",
    "ClientAlreadyRunningError",
    "RemoteWriteFailedError",
]
