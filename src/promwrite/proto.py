"""Prometheus remote-write 2.0 wire messages.

The message classes are built at import time from a descriptor assembled in
code, so no generated ``_pb2`` module is needed. Only the parts of
``io.prometheus.write.v2`` this client writes are described: histograms and
exemplars are never produced.
"""

from enum import IntEnum

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "io.prometheus.write.v2"

CONTENT_TYPE = f"application/x-protobuf;proto={PACKAGE}.Request"
CONTENT_ENCODING = "snappy"
PROTOCOL_VERSION = "2.0.0"
VERSION_HEADER = "X-Prometheus-Remote-Write-Version"


class MetricType(IntEnum):
    """Values of ``Metadata.MetricType``."""
    UNSPECIFIED = 0
    COUNTER = 1
    GAUGE = 2
    HISTOGRAM = 3
    GAUGEHISTOGRAM = 4
    SUMMARY = 5
    INFO = 6
    STATESET = 7


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    field = descriptor_pb2.FieldDescriptorProto
    optional, repeated = field.LABEL_OPTIONAL, field.LABEL_REPEATED

    fdp = descriptor_pb2.FileDescriptorProto(
        name="promwrite/remote_write_v2.proto",
        package=PACKAGE,
        syntax="proto3",
    )

    sample = fdp.message_type.add(name="Sample")
    sample.field.add(name="value", number=1, type=field.TYPE_DOUBLE, label=optional)
    sample.field.add(name="timestamp", number=2, type=field.TYPE_INT64, label=optional)

    metadata = fdp.message_type.add(name="Metadata")
    metric_type = metadata.enum_type.add(name="MetricType")
    for member in MetricType:
        metric_type.value.add(name=f"METRIC_TYPE_{member.name}", number=member.value)
    metadata.field.add(
        name="type", number=1, type=field.TYPE_ENUM, label=optional,
        type_name=f".{PACKAGE}.Metadata.MetricType",
    )
    metadata.field.add(name="help_ref", number=3, type=field.TYPE_UINT32, label=optional)
    metadata.field.add(name="unit_ref", number=4, type=field.TYPE_UINT32, label=optional)

    series = fdp.message_type.add(name="TimeSeries")
    series.field.add(name="labels_refs", number=1, type=field.TYPE_UINT32, label=repeated)
    series.field.add(
        name="samples", number=2, type=field.TYPE_MESSAGE, label=repeated,
        type_name=f".{PACKAGE}.Sample",
    )
    series.field.add(
        name="metadata", number=5, type=field.TYPE_MESSAGE, label=optional,
        type_name=f".{PACKAGE}.Metadata",
    )
    series.field.add(name="created_timestamp", number=6, type=field.TYPE_INT64, label=optional)

    request = fdp.message_type.add(name="Request")
    request.reserved_range.add(start=1, end=4)
    request.field.add(name="symbols", number=4, type=field.TYPE_STRING, label=repeated)
    request.field.add(
        name="timeseries", number=5, type=field.TYPE_MESSAGE, label=repeated,
        type_name=f".{PACKAGE}.TimeSeries",
    )

    return fdp


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message(name: str):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Sample = _message("Sample")
Metadata = _message("Metadata")
TimeSeries = _message("TimeSeries")
Request = _message("Request")
