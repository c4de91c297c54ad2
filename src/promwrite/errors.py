"""Errors raised by the remote-write client."""

import httpx


class PromWriteError(Exception):
    """Base class for all promwrite errors."""


# =============================================================================
# Construction
# =============================================================================

class ConfigurationError(PromWriteError, ValueError):
    """The client could not be created from the given parameters."""


class MissingEndpointError(ConfigurationError):
    def __init__(self):
        super().__init__("No remote_write endpoint provided")


class MissingInstanceError(ConfigurationError):
    def __init__(self):
        super().__init__("No instance label provided")


class MissingJobError(ConfigurationError):
    def __init__(self):
        super().__init__("No job label provided")


class MissingRegistryError(ConfigurationError):
    def __init__(self):
        super().__init__("No registry provided")


class MissingAuthCredentialsError(ConfigurationError):
    def __init__(self):
        super().__init__("Basic auth needs both a username and a password")


class InvalidEndpointError(ConfigurationError):
    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Invalid remote_write endpoint {endpoint!r}: {reason}")


# =============================================================================
# Collection
# =============================================================================

class CollectionError(PromWriteError):
    """A metric could not be converted; the whole batch is dropped."""


class InvalidMetricDescError(CollectionError):
    def __init__(self, desc: object):
        self.desc = desc
        super().__init__(f"Could not determine metric name from descriptor: {desc!r}")


class UnknownMetricTypeError(CollectionError):
    def __init__(self, name: str, populated: int = 0):
        self.name = name
        self.populated = populated
        if populated:
            detail = f"{populated} value kinds populated"
        else:
            detail = "no counter, gauge or untyped value"
        super().__init__(f"Unknown metric type for {name!r}: {detail}")


# =============================================================================
# Lifecycle
# =============================================================================

class ClientAlreadyRunningError(PromWriteError, RuntimeError):
    def __init__(self):
        super().__init__("remote_write client is already running")


# =============================================================================
# Sending
# =============================================================================

class RemoteWriteFailedError(PromWriteError):
    """The remote endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"remote_write failed with status {status_code}: {body}")

    def __eq__(self, other):
        if not isinstance(other, RemoteWriteFailedError):
            return NotImplemented
        return (self.status_code, self.body) == (other.status_code, other.body)

    __hash__ = PromWriteError.__hash__

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RemoteWriteFailedError":
        """Build the error from a response, reading its body if possible.

        If the body cannot be read, the read failure itself becomes the body.
        """
        try:
            body = response.read().decode(response.encoding or "utf-8", errors="replace")
        except (httpx.HTTPError, httpx.StreamError) as e:
            body = f"failed to read response body: {e}"
        return cls(response.status_code, body)
