"""HTTP transport for remote-write requests."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
import snappy

from . import __version__, proto
from .collector import Batch
from .errors import RemoteWriteFailedError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds

SAMPLES_WRITTEN_HEADER = "X-Prometheus-Remote-Write-Samples-Written"
HISTOGRAMS_WRITTEN_HEADER = "X-Prometheus-Remote-Write-Histograms-Written"
EXEMPLARS_WRITTEN_HEADER = "X-Prometheus-Remote-Write-Exemplars-Written"


@dataclass
class WriteStats:
    """What the receiver reports as written for one request."""

    samples: int = 0
    histograms: int = 0
    exemplars: int = 0
    confirmed: bool = False  # True when the receiver sent the stats headers

    @property
    def all_samples(self) -> int:
        return self.samples + self.histograms

    @property
    def no_data_written(self) -> bool:
        return self.samples == 0 and self.histograms == 0 and self.exemplars == 0

    @classmethod
    def from_headers(cls, headers: httpx.Headers, batch: Batch) -> "WriteStats":
        """Read the written-counts headers, falling back to the batch's own counts."""
        names = (SAMPLES_WRITTEN_HEADER, HISTOGRAMS_WRITTEN_HEADER, EXEMPLARS_WRITTEN_HEADER)
        if not any(name in headers for name in names):
            return cls(samples=batch.sample_count)

        counts = []
        for name in names:
            try:
                counts.append(int(headers.get(name, 0)))
            except ValueError:
                logger.warning(f"Ignoring malformed {name} header: {headers.get(name)!r}")
                counts.append(0)
        return cls(samples=counts[0], histograms=counts[1], exemplars=counts[2], confirmed=True)


class RemoteWriteTransport:
    """
    Sends batches to a remote-write endpoint.

    Each call to ``send`` makes exactly one attempt. Retrying is left to the
    next scheduled tick.
    """

    def __init__(
        self,
        endpoint: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._auth = httpx.BasicAuth(username, password) if username else None
        self._client = http_client or httpx.Client(timeout=timeout)

    def _get_headers(self) -> dict:
        return {
            "Content-Type": proto.CONTENT_TYPE,
            "Content-Encoding": proto.CONTENT_ENCODING,
            proto.VERSION_HEADER: proto.PROTOCOL_VERSION,
            "User-Agent": f"promwrite/{__version__}",
        }

    def encode(self, batch: Batch) -> bytes:
        """Serialize and snappy-compress a batch."""
        return snappy.compress(batch.serialize())

    def send(self, batch: Batch) -> WriteStats:
        """
        POST one batch to the endpoint.

        Raises:
            RemoteWriteFailedError: the endpoint answered with a non-2xx status
            httpx.HTTPError: the request could not be delivered
        """
        body = self.encode(batch)
        request_kwargs = {"content": body, "headers": self._get_headers()}
        if self._auth is not None:
            request_kwargs["auth"] = self._auth

        with self._client.stream("POST", self.endpoint, **request_kwargs) as response:
            if not response.is_success:
                raise RemoteWriteFailedError.from_response(response)
            stats = WriteStats.from_headers(response.headers, batch)

        logger.debug(f"Wrote {stats.all_samples} samples ({len(body)} bytes) to {self.endpoint}")
        return stats

    def close(self):
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "RemoteWriteTransport":
        return self

    def __exit__(self, *exc):
        self.close()
