"""Tests for the demo entry point."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from retry_executor.config import Settings
from retry_executor.exceptions import RetriesExhaustedError
from retry_executor.main import build_settings, main, parse_args, run


class TestRun:
    """Tests for run()."""

    @pytest.fixture
    def settings(self, tmp_path):
        return Settings(
            _env_file=None,
            fetch_url="https://example.com/todos/1",
            max_retries=3,
            retry_delay_ms=1,
            log_dir=tmp_path,
        )

    @pytest.fixture
    def mock_client(self):
        """Patch JsonClient so run() never touches the network."""
        with patch("retry_executor.main.JsonClient") as mock_cls:
            client = AsyncMock()
            mock_cls.return_value.__aenter__.return_value = client
            yield mock_cls, client

    @pytest.mark.asyncio
    async def test_prints_data_after_retries(self, settings, mock_client, capsys):
        mock_cls, client = mock_client
        client.fetch_json.side_effect = [
            ConnectionError("network error"),
            ConnectionError("network error"),
            {"id": 1},
        ]

        data = await run(settings)

        assert data == {"id": 1}
        assert client.fetch_json.call_count == 3
        mock_cls.assert_called_once_with(settings)
        assert "Finally Data Is Here: {'id': 1}" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_raises_when_exhausted(self, settings, mock_client):
        _, client = mock_client
        client.fetch_json.side_effect = ConnectionError("timeout")

        with pytest.raises(RetriesExhaustedError):
            await run(settings)

        assert client.fetch_json.call_count == 4

    @pytest.mark.asyncio
    async def test_writes_component_logs(self, settings, mock_client, tmp_path):
        _, client = mock_client
        client.fetch_json.return_value = {"id": 1}

        await run(settings)

        assert (tmp_path / "main.log").exists()
        assert (tmp_path / "executor.log").exists()
        assert (tmp_path / "clients.json_client.log").exists()

    @pytest.mark.asyncio
    async def test_client_records_reach_component_file(self, tmp_path):
        """Test that a run against an unreachable host logs every component to its file."""
        settings = Settings(
            _env_file=None,
            fetch_url="https://example.com/todos/1",
            max_retries=1,
            retry_delay_ms=0,
            log_dir=tmp_path,
            log_level="DEBUG",
        )

        with patch("retry_executor.clients.json_client.aiohttp.ClientSession") as mock_session_cls:
            session = mock_session_cls.return_value
            session.get.side_effect = aiohttp.ClientConnectionError("connection refused")
            session.close = AsyncMock()

            with pytest.raises(RetriesExhaustedError):
                await run(settings)

        assert sorted(path.name for path in tmp_path.iterdir()) == [
            "clients.json_client.log",
            "executor.log",
            "main.log",
        ]
        client_log = (tmp_path / "clients.json_client.log").read_text()
        assert client_log.count("GET https://example.com/todos/1") == 2
        assert "connection refused" in (tmp_path / "executor.log").read_text()


class TestCommandLine:
    """Tests for argument parsing and main()."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("MAX_RETRIES", "RETRY_DELAY_MS", "FETCH_URL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def test_options_override_settings(self):
        args = parse_args([
            "--url", "https://example.com/x",
            "--max-retries", "5",
            "--delay-ms", "20",
            "--log-level", "DEBUG",
        ])

        settings = build_settings(args)

        assert settings.fetch_url == "https://example.com/x"
        assert settings.max_retries == 5
        assert settings.retry_delay_ms == 20
        assert settings.log_level == "DEBUG"

    def test_missing_options_fall_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_RETRIES", "9")

        settings = build_settings(parse_args([]))

        assert settings.max_retries == 9
        assert settings.retry_delay_ms == 1

    def test_main_returns_zero_on_success(self):
        with patch("retry_executor.main.run", AsyncMock(return_value={"id": 1})) as mock_run:
            assert main(["--max-retries", "0"]) == 0

        settings = mock_run.call_args[0][0]
        assert settings.max_retries == 0

    def test_main_returns_one_when_exhausted(self, capsys):
        error = RetriesExhaustedError(ConnectionError("down"), attempts=4)

        with patch("retry_executor.main.run", AsyncMock(side_effect=error)):
            assert main([]) == 1

        assert "Maximum retries exhausted! Last error: down" in capsys.readouterr().out
