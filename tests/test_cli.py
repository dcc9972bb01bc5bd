"""Tests for the command line entry point."""

import logging
import os
from pathlib import Path

import pytest
from lokalise_sync import cli
from lokalise_sync.common import ConfigLoader
from lokalise_sync.errors import ConfigurationError, RemoteReportedError


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Keep user/system config, env and root logging out of the tests."""
    monkeypatch.setattr(ConfigLoader, "_load_system_config", lambda self: None)
    monkeypatch.setattr(ConfigLoader, "_load_user_config", lambda self: None)
    for key in list(os.environ):
        if key.startswith("LOKALISE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def calls(monkeypatch):
    """Replace run_export and record its arguments."""
    recorded = []

    def fake_run_export(options, destination, clean_first=False, **kwargs):
        recorded.append({
            "options": options,
            "destination": destination,
            "clean_first": clean_first,
            **kwargs,
        })
        return destination

    monkeypatch.setattr(cli, "run_export", fake_run_export)
    return recorded


@pytest.fixture
def destination(tmp_path):
    target = tmp_path / "out"
    target.mkdir()
    return target


class TestParseParameters:
    """Test KEY=VALUE parsing."""

    def test_pairs(self):
        assert cli.parse_parameters(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}

    @pytest.mark.parametrize("item", ["novalue", "=x"])
    def test_invalid(self, item):
        with pytest.raises(ConfigurationError):
            cli.parse_parameters([item])


class TestMain:
    """Test argument handling and exit codes."""

    def test_success(self, calls, destination, capsys):
        """Test flags become export options and the destination is printed."""
        code = cli.main([
            "--api-token", "t",
            "--project-id", "p",
            "--destination", str(destination),
            "--language", "en",
            "--language", "fr",
            "--tag", "ios",
            "--include-comments",
            "--clean-destination",
            "--param", "export_sort=a_z",
        ])

        assert code == cli.EXIT_OK
        assert len(calls) == 1
        options = calls[0]["options"]
        assert options.api_token == "t"
        assert options.project_id == "p"
        assert options.languages == ("en", "fr")
        assert options.tags == ("ios",)
        assert options.include_comments is True
        assert options.use_original_filenames is False
        assert dict(options.extra_parameters) == {"export_sort": "a_z"}
        assert calls[0]["clean_first"] is True
        assert calls[0]["destination"] == destination.resolve()
        assert calls[0]["work_dir"] == Path("lokalisetmp")
        assert capsys.readouterr().out.strip() == str(destination.resolve())

    def test_credentials_from_environment(self, calls, destination, monkeypatch):
        """Test LOKALISE_API_TOKEN / LOKALISE_PROJECT_ID are used when flags are absent."""
        monkeypatch.setenv("LOKALISE_API_TOKEN", "env-token")
        monkeypatch.setenv("LOKALISE_PROJECT_ID", "env-project")

        code = cli.main(["--destination", str(destination)])

        assert code == cli.EXIT_OK
        assert calls[0]["options"].api_token == "env-token"
        assert calls[0]["options"].project_id == "env-project"
        assert calls[0]["clean_first"] is False

    def test_config_file_values(self, calls, destination, tmp_path):
        """Test config file values apply and flags override them."""
        config_file = tmp_path / "sync.toml"
        config_file.write_text(
            '[http]\n'
            'timeout_seconds = 12.5\n'
            '[export]\n'
            f'destination = "{destination.as_posix()}"\n'
            'languages = ["de"]\n'
            'use_original = true\n'
            'work_directory = "scratch"\n'
            '[export.extra_parameters]\n'
            'export_sort = "first_added"\n'
            'replace_breaks = false\n'
        )

        code = cli.main([
            "--config", str(config_file),
            "--api-token", "t",
            "--project-id", "p",
            "--param", "export_sort=a_z",
        ])

        assert code == cli.EXIT_OK
        options = calls[0]["options"]
        assert options.languages == ("de",)
        assert options.use_original_filenames is True
        assert dict(options.extra_parameters) == {"export_sort": "a_z", "replace_breaks": False}
        assert calls[0]["timeout"] == 12.5
        assert calls[0]["work_dir"] == Path("scratch")

    def test_missing_token(self, calls, destination):
        """Test a missing API token is a configuration error."""
        code = cli.main(["--project-id", "p", "--destination", str(destination)])

        assert code == cli.EXIT_CONFIG
        assert calls == []

    def test_missing_destination(self, calls):
        """Test the destination is required."""
        code = cli.main(["--api-token", "t", "--project-id", "p"])

        assert code == cli.EXIT_CONFIG
        assert calls == []

    def test_destination_not_a_directory(self, calls, tmp_path):
        """Test a destination that does not exist is rejected."""
        code = cli.main([
            "--api-token", "t", "--project-id", "p",
            "--destination", str(tmp_path / "nowhere"),
        ])

        assert code == cli.EXIT_CONFIG
        assert calls == []

    def test_invalid_config_file(self, calls, destination, tmp_path):
        """Test schema violations in the config file exit with the config status."""
        config_file = tmp_path / "sync.toml"
        config_file.write_text('[export]\nunknown = 1\n')

        code = cli.main(["--config", str(config_file), "--destination", str(destination)])

        assert code == cli.EXIT_CONFIG
        assert calls == []

    def test_pipeline_failure(self, monkeypatch, destination):
        """Test a failed run exits with status 1."""
        def failing_run_export(*args, **kwargs):
            raise RemoteReportedError("401", "bad token")

        monkeypatch.setattr(cli, "run_export", failing_run_export)

        code = cli.main([
            "--api-token", "t", "--project-id", "p", "--destination", str(destination),
        ])

        assert code == cli.EXIT_FAILED
