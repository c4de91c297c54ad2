"""Remote-write client - the public entry point."""

import logging
import socket
from typing import Optional
from urllib.parse import urlsplit

from prometheus_client.registry import Collector as RegistryCollector

from .collector import Batch, Collector
from .errors import (
    InvalidEndpointError,
    MissingAuthCredentialsError,
    MissingEndpointError,
    MissingInstanceError,
    MissingJobError,
    MissingRegistryError,
)
from .scheduler import PushScheduler
from .transport import DEFAULT_TIMEOUT, RemoteWriteTransport, WriteStats

logger = logging.getLogger(__name__)

DEFAULT_JOB = "promwrite"


def default_instance() -> str:
    """Instance label used when none is configured: the local hostname."""
    return socket.gethostname()


def _validate_endpoint(endpoint: str) -> str:
    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise InvalidEndpointError(endpoint, str(e)) from e
    if parts.scheme not in ("http", "https"):
        raise InvalidEndpointError(endpoint, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidEndpointError(endpoint, "missing host")
    return endpoint


class WriteClient:
    """
    Periodically pushes a prometheus_client registry to a remote-write endpoint.

    Example:
        registry = CollectorRegistry()
        client = WriteClient("https://prom.example.com/api/v1/write", "host-1", "myjob", registry)
        client.run(30)
        ...
        client.stop()
    """

    def __init__(
        self,
        endpoint: str,
        instance: str,
        job: str,
        registry: RegistryCollector,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[RemoteWriteTransport] = None,
    ):
        if not endpoint:
            raise MissingEndpointError()
        if not instance:
            raise MissingInstanceError()
        if not job:
            raise MissingJobError()
        if registry is None:
            raise MissingRegistryError()
        if (username or password) and not (username and password):
            raise MissingAuthCredentialsError()

        self._endpoint = _validate_endpoint(endpoint)
        self._instance = instance
        self._job = job
        self._username = username or None
        self._password = password or None
        self._registry = registry

        self._collector = Collector(instance=instance, job=job)
        self._transport = transport or RemoteWriteTransport(
            endpoint,
            username=self._username,
            password=self._password,
            timeout=timeout,
        )
        self._scheduler = PushScheduler(collect=self.collect, send=self.send)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def instance(self) -> str:
        return self._instance

    @property
    def job(self) -> str:
        return self._job

    @property
    def registry(self) -> RegistryCollector:
        """The registry metrics are collected from."""
        return self._registry

    @staticmethod
    def registry_of(client: Optional["WriteClient"]) -> Optional[RegistryCollector]:
        """Return the registry of ``client``, or None when there is no client."""
        if client is None:
            return None
        return client.registry

    def collect(self) -> Batch:
        """Collect one batch from the registry."""
        return self._collector.collect(self._registry)

    def send(self, batch: Batch) -> WriteStats:
        """Send one batch, single attempt."""
        return self._transport.send(batch)

    def run(self, interval: float):
        """
        Start pushing metrics every ``interval`` seconds in the background.

        Returns immediately. Raises ClientAlreadyRunningError if the client
        is already running.
        """
        self._scheduler.start(interval)
        logger.info(f"Pushing metrics to {self._endpoint} every {interval}s")

    def is_running(self) -> bool:
        return self._scheduler.is_running()

    def stop(self):
        """Stop the background loop. Safe to call when not running."""
        self._scheduler.stop()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for a stopped loop to exit."""
        return self._scheduler.wait(timeout)

    def close(self):
        """Stop the loop and release the HTTP client."""
        self.stop()
        self.wait()
        self._transport.close()

    def __enter__(self) -> "WriteClient":
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self) -> str:
        return (
            f"WriteClient(endpoint={self._endpoint!r}, instance={self._instance!r}, "
            f"job={self._job!r}, running={self.is_running()})"
        )
