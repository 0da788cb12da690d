"""Tests for CLI module."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from http_latency.cli import main, run
from http_latency.errors import EmptyInputError
from http_latency.models.result import Failure, Measurement, Result, Success
from http_latency.models.target import Target

EXAMPLE = Target(scheme="http", host="example.com", port=80, raw="example.com")

RESULTS = [
    Result(
        index=0,
        raw="example.com",
        target=EXAMPLE,
        outcome=Success(
            status_code=200,
            measurement=Measurement(target=EXAMPLE, start=1.0, end=1.05),
        ),
    ),
    Result(
        index=1,
        raw="bogus url with spaces",
        target=None,
        outcome=Failure(kind="MalformedTarget", message="Invalid host"),
    ),
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run without ambient settings."""
    monkeypatch.delenv("HTTP_LATENCY_CONCURRENCY", raising=False)
    monkeypatch.delenv("HTTP_LATENCY_TIMEOUT", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Target list with one valid and one malformed entry."""
    path = tmp_path / "urls.txt"
    path.write_text("example.com\nbogus url with spaces\n", encoding="utf-8")
    return path


class TestRun:
    """Tests for run function."""

    @pytest.fixture
    def mock_dispatcher(self) -> Mock:
        """Create mock dispatcher."""
        dispatcher = Mock()
        dispatcher.run = AsyncMock(return_value=RESULTS)
        return dispatcher

    @pytest.fixture
    def mock_context_manager(self, mock_dispatcher: Mock) -> AsyncMock:
        """Create mock async context manager that yields the dispatcher."""
        cm = AsyncMock()
        cm.__aenter__.return_value = mock_dispatcher
        cm.__aexit__.return_value = None
        return cm

    async def test_writes_report_and_returns_zero(
        self,
        mock_context_manager: AsyncMock,
        mock_dispatcher: Mock,
        input_file: Path,
        tmp_path: Path,
    ) -> None:
        """Returns 0 and writes one line per target, failures included."""
        output = tmp_path / "output.txt"

        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            mock_dispatcher_cls.from_config.return_value = mock_context_manager

            exit_code = await run(input_file, output)

        assert exit_code == 0
        assert output.read_text(encoding="utf-8") == (
            "example.com,50,200\n"
            "bogus url with spaces,ERROR:MalformedTarget:Invalid host\n"
        )
        mock_dispatcher.run.assert_awaited_once_with(
            ["example.com", "bogus url with spaces"], 10, 10.0
        )

    async def test_passes_overrides(
        self,
        mock_context_manager: AsyncMock,
        mock_dispatcher: Mock,
        input_file: Path,
        tmp_path: Path,
    ) -> None:
        """Command line values take precedence over defaults."""
        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            mock_dispatcher_cls.from_config.return_value = mock_context_manager

            await run(input_file, tmp_path / "out.txt", concurrency=2, timeout=5)

        settings = mock_dispatcher_cls.from_config.call_args.args[0]
        assert settings.concurrency == 2
        assert settings.timeout == 5
        mock_dispatcher.run.assert_awaited_once_with(
            ["example.com", "bogus url with spaces"], 2, 5
        )

    async def test_json_to_stdout(
        self,
        mock_context_manager: AsyncMock,
        input_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Writes a JSON report to stdout when asked to."""
        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            mock_dispatcher_cls.from_config.return_value = mock_context_manager

            exit_code = await run(input_file, "-", fmt="json")

        assert exit_code == 0
        captured = capsys.readouterr()
        assert '"total": 2' in captured.out
        assert '"succeeded": 1' in captured.out

    async def test_missing_input_returns_one(self, tmp_path: Path) -> None:
        """Returns 1 without measuring when the input cannot be read."""
        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            exit_code = await run(tmp_path / "missing.txt", tmp_path / "out.txt")

        assert exit_code == 1
        mock_dispatcher_cls.from_config.assert_not_called()
        assert not (tmp_path / "out.txt").exists()

    async def test_invalid_concurrency_returns_one(
        self, input_file: Path, tmp_path: Path
    ) -> None:
        """Returns 1 for out of range settings."""
        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            exit_code = await run(input_file, tmp_path / "out.txt", concurrency=0)

        assert exit_code == 1
        mock_dispatcher_cls.from_config.assert_not_called()

    async def test_empty_input_returns_one(
        self,
        mock_context_manager: AsyncMock,
        mock_dispatcher: Mock,
        tmp_path: Path,
    ) -> None:
        """Returns 1 when the dispatcher rejects an empty list."""
        empty = tmp_path / "empty.txt"
        empty.write_text("# nothing here\n", encoding="utf-8")
        mock_dispatcher.run.side_effect = EmptyInputError("No targets to measure")

        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            mock_dispatcher_cls.from_config.return_value = mock_context_manager

            exit_code = await run(empty, tmp_path / "out.txt")

        assert exit_code == 1
        assert not (tmp_path / "out.txt").exists()

    async def test_unwritable_output_returns_one(
        self,
        mock_context_manager: AsyncMock,
        input_file: Path,
        tmp_path: Path,
    ) -> None:
        """Returns 1 when the report cannot be written."""
        with patch("http_latency.cli.Dispatcher") as mock_dispatcher_cls:
            mock_dispatcher_cls.from_config.return_value = mock_context_manager

            exit_code = await run(input_file, tmp_path / "missing" / "out.txt")

        assert exit_code == 1


class TestMain:
    """Tests for main function."""

    def test_parses_arguments(self, input_file: Path) -> None:
        """Forwards parsed arguments to run and exits with its code."""
        argv = [
            "http-latency",
            str(input_file),
            "-o",
            "report.json",
            "--format",
            "json",
            "-c",
            "4",
            "-t",
            "2.5",
        ]

        with (
            patch("sys.argv", argv),
            patch("http_latency.cli.run", new_callable=Mock) as mock_run,
            patch("http_latency.cli.asyncio.run", return_value=0) as mock_asyncio_run,
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 0
        mock_run.assert_called_once_with(
            input_path=str(input_file),
            output="report.json",
            fmt="json",
            concurrency=4,
            timeout=2.5,
        )
        mock_asyncio_run.assert_called_once_with(mock_run.return_value)

    def test_defaults(self, input_file: Path) -> None:
        """Writes text to output.txt with settings left to the environment."""
        with (
            patch("sys.argv", ["http-latency", str(input_file)]),
            patch("http_latency.cli.run", new_callable=Mock) as mock_run,
            patch("http_latency.cli.asyncio.run", return_value=1),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 1
        mock_run.assert_called_once_with(
            input_path=str(input_file),
            output="output.txt",
            fmt="text",
            concurrency=None,
            timeout=None,
        )

    def test_rejects_unknown_format(self, input_file: Path) -> None:
        """Exits with usage error for an unsupported format."""
        with (
            patch("sys.argv", ["http-latency", str(input_file), "--format", "xml"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 2
