"""Tests for the promwrite CLI."""

import socket

import pytest
import yaml
from click.testing import CliRunner

from promwrite import __version__
from promwrite.cli import build_registry, main
from promwrite.client import DEFAULT_JOB
from promwrite.collector import Collector
from promwrite.config import WriterConfig


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    """Tests for the click commands."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_collect(self, runner):
        result = runner.invoke(main, ["collect", "--limit", "3"])
        assert result.exit_code == 0, result.output
        assert "Collected" in result.output

    def test_init_writes_loadable_config(self, runner, tmp_path):
        output = tmp_path / "promwrite.yaml"
        result = runner.invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 0, result.output
        config = WriterConfig.from_file(output)
        assert config.url == "http://localhost:9090/api/v1/write"

    def test_run_without_endpoint_fails(self, runner, tmp_path, monkeypatch):
        monkeypatch.delenv("PROMWRITE_URL", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["run", "--listen-port", "0"])

        assert result.exit_code == 1
        assert "No remote_write endpoint provided" in result.output

    def test_run_uses_log_level_from_config(self, runner, tmp_path, monkeypatch):
        levels = []
        monkeypatch.setattr("promwrite.cli.setup_logging", levels.append)
        monkeypatch.delenv("PROMWRITE_URL", raising=False)
        path = tmp_path / "promwrite.yaml"
        path.write_text(yaml.safe_dump({"url": "", "log_level": "DEBUG"}))

        result = runner.invoke(main, ["run", "-c", str(path), "--listen-port", "0"])
        assert result.exit_code == 1
        assert levels == ["DEBUG"]

        levels.clear()
        runner.invoke(main, ["run", "-c", str(path), "--listen-port", "0", "--log-level", "WARNING"])
        assert levels == ["WARNING"]

    def test_collect_defaults_to_hostname_and_default_job(self, runner, monkeypatch):
        seen = {}

        class RecordingCollector(Collector):
            def __init__(self, instance, job):
                seen.update(instance=instance, job=job)
                super().__init__(instance=instance, job=job)

        monkeypatch.setattr("promwrite.cli.Collector", RecordingCollector)
        result = runner.invoke(main, ["collect", "--limit", "1"])

        assert result.exit_code == 0, result.output
        assert seen == {"instance": socket.gethostname(), "job": DEFAULT_JOB}


class TestBuildRegistry:
    def test_has_platform_metrics(self):
        registry = build_registry()
        names = {family.name for family in registry.collect()}
        assert "python_info" in names
