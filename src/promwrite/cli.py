"""promwrite CLI - push the local process metrics to a remote-write endpoint."""

import logging
import signal
import sys
import threading
from typing import Optional

import click
import yaml
from prometheus_client import (
    CollectorRegistry,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    start_http_server,
)
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .client import DEFAULT_JOB, WriteClient, default_instance
from .collector import Collector
from .config import WriterConfig, load_config
from .errors import CollectionError, ConfigurationError

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def build_registry() -> CollectorRegistry:
    """Registry holding the process, platform and GC metrics of this process."""
    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
    return registry


def _apply_overrides(config: WriterConfig, **overrides) -> WriterConfig:
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="promwrite")
def main():
    """promwrite - push Prometheus metrics via remote-write."""
    pass


@main.command()
@click.option("--config", "-c", "config_path", help="Path to config file")
@click.option("--url", "-u", envvar="PROMWRITE_URL", help="remote_write endpoint URL")
@click.option("--username", envvar="PROMWRITE_USERNAME", help="Basic auth username")
@click.option("--password", envvar="PROMWRITE_PASSWORD", help="Basic auth password")
@click.option("--instance", help="Value of the instance label")
@click.option("--job", help="Value of the job label")
@click.option("--interval", type=float, help="Push interval in seconds")
@click.option("--listen-port", type=int, help="Port of the local scrape endpoint, 0 disables it")
@click.option("--log-level", help="Log level (overrides the config file)")
def run(
    config_path: Optional[str],
    url: Optional[str],
    username: Optional[str],
    password: Optional[str],
    instance: Optional[str],
    job: Optional[str],
    interval: Optional[float],
    listen_port: Optional[int],
    log_level: Optional[str],
):
    """Push metrics until interrupted."""
    config = _apply_overrides(
        load_config(config_path),
        url=url,
        username=username,
        password=password,
        instance=instance,
        job=job,
        interval=interval,
        listen_port=listen_port,
        log_level=log_level,
    )
    setup_logging(config.log_level)

    registry = build_registry()
    try:
        client = WriteClient(
            config.url,
            config.instance,
            config.job,
            registry,
            username=config.username,
            password=config.password,
            timeout=config.timeout,
        )
    except ConfigurationError as e:
        console.print(f"[red]x {e}[/red]")
        sys.exit(1)

    server = None
    if config.listen_port:
        server, _ = start_http_server(config.listen_port, registry=registry)
        logger.info(f"Serving metrics on :{config.listen_port}")

    console.print(Panel(
        f"[bold green]promwrite v{__version__}[/bold green]\n"
        f"Endpoint: {config.url}\n"
        f"Instance: {config.instance}\n"
        f"Job: {config.job}\n"
        f"Interval: {config.interval}s",
        title="Starting",
    ))

    quit_event = threading.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda *_: quit_event.set())

    client.run(config.interval)
    try:
        quit_event.wait()
        logger.info("Received stop signal, shutting down")
    finally:
        client.close()
        if server is not None:
            server.shutdown()


@main.command()
@click.option("--instance", default=default_instance, show_default="hostname", help="Value of the instance label")
@click.option("--job", default=DEFAULT_JOB, show_default=True, help="Value of the job label")
@click.option("--limit", default=50, help="Maximum number of series to show")
def collect(instance: str, job: str, limit: int):
    """Collect the local metrics once and show them without sending."""
    collector = Collector(instance=instance, job=job)
    try:
        batch = collector.collect(build_registry())
    except CollectionError as e:
        console.print(f"[red]x Collection failed: {e}[/red]")
        sys.exit(1)

    if not batch.timeseries:
        console.print("[yellow]No metrics collected[/yellow]")
        return

    table = Table(title=f"Collected {len(batch)} Series ({len(batch.symbols)} symbols)", show_lines=True)
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Labels", style="dim")

    for ts in batch.timeseries[:limit]:
        labels = [batch.symbols[ref] for ref in ts.labels_refs]
        pairs = dict(zip(labels[::2], labels[1::2]))
        name = pairs.pop("__name__", "")
        labels_str = ", ".join(f"{k}={v}" for k, v in pairs.items())
        table.add_row(name, f"{ts.samples[0].value:g}", labels_str)

    console.print(table)

    if len(batch) > limit:
        console.print(f"[dim]... and {len(batch) - limit} more series[/dim]")


@main.command()
@click.option("--output", "-o", type=click.Path(), help="Output file path")
def init(output: Optional[str]):
    """Generate a sample configuration file."""
    sample = WriterConfig(url="http://localhost:9090/api/v1/write")

    output_path = output or "promwrite.yaml"

    with open(output_path, "w") as f:
        f.write("# promwrite configuration\n")
        f.write("# Credentials can also be set via PROMWRITE_USERNAME / PROMWRITE_PASSWORD\n")
        yaml.safe_dump(sample.to_dict(), f, sort_keys=False)

    console.print(f"[green]+ Created config file: {output_path}[/green]")
    console.print("\nEdit the file, then run:")
    console.print(f"  [cyan]promwrite run -c {output_path}[/cyan]")


if __name__ == "__main__":
    main()
