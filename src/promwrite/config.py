"""Configuration management for promwrite."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .client import DEFAULT_JOB, default_instance
from .transport import DEFAULT_TIMEOUT


@dataclass
class WriterConfig:
    """Settings for one remote-write client process."""

    # Remote endpoint
    url: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    # Labels attached to every series
    instance: str = field(default_factory=default_instance)
    job: str = DEFAULT_JOB

    # Loop settings
    interval: float = 30.0  # seconds
    listen_port: int = 8080  # local scrape endpoint, 0 disables it
    log_level: str = "INFO"

    @classmethod
    def from_file(cls, path: str | Path) -> "WriterConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "WriterConfig":
        """Create config from dictionary."""
        config = cls()

        config.url = data.get("url", config.url)
        config.username = data.get("username")
        config.password = data.get("password")
        config.timeout = float(data.get("timeout", config.timeout))

        config.instance = data.get("instance") or config.instance
        config.job = data.get("job") or config.job

        config.interval = float(data.get("interval", config.interval))
        config.listen_port = int(data.get("listen_port", config.listen_port))
        config.log_level = data.get("log_level", config.log_level)

        # Override URL and credentials from env
        if os.environ.get("PROMWRITE_URL"):
            config.url = os.environ["PROMWRITE_URL"]
        if os.environ.get("PROMWRITE_USERNAME"):
            config.username = os.environ["PROMWRITE_USERNAME"]
        if os.environ.get("PROMWRITE_PASSWORD"):
            config.password = os.environ["PROMWRITE_PASSWORD"]

        return config

    @classmethod
    def from_env(cls) -> "WriterConfig":
        """Create config from environment variables."""
        config = cls()

        config.url = os.environ.get("PROMWRITE_URL", config.url)
        config.username = os.environ.get("PROMWRITE_USERNAME")
        config.password = os.environ.get("PROMWRITE_PASSWORD")
        config.instance = os.environ.get("PROMWRITE_INSTANCE") or config.instance
        config.job = os.environ.get("PROMWRITE_JOB") or config.job

        if os.environ.get("PROMWRITE_INTERVAL"):
            config.interval = float(os.environ["PROMWRITE_INTERVAL"])
        if os.environ.get("PROMWRITE_LISTEN_PORT"):
            config.listen_port = int(os.environ["PROMWRITE_LISTEN_PORT"])

        config.log_level = os.environ.get("PROMWRITE_LOG_LEVEL", config.log_level)

        return config

    def to_dict(self) -> dict:
        """Convert to a dictionary suitable for writing back as YAML."""
        return {
            "url": self.url,
            "username": self.username,
            "password": self.password,
            "timeout": self.timeout,
            "instance": self.instance,
            "job": self.job,
            "interval": self.interval,
            "listen_port": self.listen_port,
            "log_level": self.log_level,
        }


def load_config(config_path: Optional[str] = None) -> WriterConfig:
    """Load configuration from file or environment."""
    # Try config file first
    if config_path and Path(config_path).exists():
        return WriterConfig.from_file(config_path)

    # Try default locations
    default_paths = [
        Path("promwrite.yaml"),
        Path("promwrite.yml"),
        Path.home() / ".promwrite" / "config.yaml",
        Path("/etc/promwrite/config.yaml"),
    ]

    for path in default_paths:
        if path.exists():
            return WriterConfig.from_file(path)

    # Fall back to environment
    return WriterConfig.from_env()
