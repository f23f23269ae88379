"""Test suite for the command-line interface."""

from unittest.mock import patch

from click.testing import CliRunner
from loguru import logger
from pydantic import ValidationError

from neatest.cli import main
from tests.conftest import EXAMPLE_INTERNAL


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_shows_help_and_fails_without_names(self):
        runner = CliRunner()
        result = runner.invoke(main, [])

        assert result.exit_code == 1
        assert "Usage:" in result.output
        assert "--int" in result.output
        assert "--ext" in result.output

    def test_int_and_ext_together_is_usage_error(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--int", "--ext", "affix1"])

        assert result.exit_code == 2
        assert "cannot be used together" in result.output

    def test_no_mode_and_no_commands_is_silent(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["--ed", str(tmp_path), "--id", str(tmp_path), "affix1"])

        assert result.exit_code == 0
        assert result.output == ""

    def test_verbose_flag(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "--id", str(tmp_path), "affix1"])

        assert result.exit_code == 0
        assert "Debug logging enabled" in result.output

    def test_installs_exception_hook(self, tmp_path):
        runner = CliRunner()
        with patch("neatest.cli.install_exception_hook") as mock_hook:
            result = runner.invoke(main, ["--id", str(tmp_path), "affix1"])

        assert result.exit_code == 0
        mock_hook.assert_called_once_with()

    def test_log_file_receives_warnings(self, dirs, tmp_path):
        internal, external = dirs
        (internal / "bad.neadic").write_text("NEA TPASS {\n    cat\n}\n")
        log_file = tmp_path / "neatest.log"

        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "--int",
                "--id", str(internal),
                "--ed", str(external),
                "--log-file", str(log_file),
                "bad",
            ],
        )
        logger.remove()

        assert result.exit_code == 0
        assert "Dropping unclassified block" in log_file.read_text()


class TestCLIConversion:
    """Tests for conversions run from the command line."""

    def test_int_converts_to_external(self, dirs):
        internal, external = dirs
        (internal / "example.neadic").write_text(EXAMPLE_INTERNAL)

        runner = CliRunner()
        result = runner.invoke(
            main, ["--int", "--id", str(internal), "--ed", str(external), "example.neadic"]
        )

        assert result.exit_code == 0
        assert (external / "example.aff").read_text() == "SET UTF-8\n"
        assert (external / "example.dic").read_text() == "2\ncat\ndog\n"
        assert (external / "example.good").read_text() == "cat\n"
        assert not (external / "example.wrong").exists()

    def test_ext_converts_to_internal(self, dirs):
        internal, external = dirs
        (external / "example.aff").write_text("SET UTF-8")
        (external / "example.dic").write_text("1\nfoo")

        runner = CliRunner()
        result = runner.invoke(
            main, ["--ext", "--id", str(internal), "--ed", str(external), "example"]
        )

        assert result.exit_code == 0
        assert (internal / "example.neadic").read_text() == "SET UTF-8\nNEA DIC {\n    foo\n}\n"

    def test_external_dir_from_environment(self, dirs, monkeypatch):
        internal, external = dirs
        (internal / "example.neadic").write_text(EXAMPLE_INTERNAL)
        monkeypatch.setenv("EXT_TEST_DIR", str(external))

        runner = CliRunner()
        result = runner.invoke(main, ["--int", "--id", str(internal), "example"])

        assert result.exit_code == 0
        assert (external / "example.dic").exists()

    def test_missing_dic_aborts(self, dirs):
        internal, external = dirs
        (external / "example.aff").write_text("SET UTF-8\n")

        runner = CliRunner()
        result = runner.invoke(
            main, ["--ext", "--id", str(internal), "--ed", str(external), "example", "other"]
        )

        assert result.exit_code != 0
        assert "example.dic" in result.output
        assert not (internal / "example.neadic").exists()

    def test_strict_aborts_on_unclassified_block(self, dirs):
        internal, external = dirs
        (internal / "bad.neadic").write_text("NEA TPASS {\n    cat\n}\n")

        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--int", "--strict", "--id", str(internal), "--ed", str(external), "bad"],
        )

        assert result.exit_code != 0
        assert "NEA TPASS" in result.output
        assert not (external / "bad.aff").exists()

    def test_name_without_basename_aborts(self, dirs):
        internal, external = dirs

        runner = CliRunner()
        result = runner.invoke(
            main, ["--int", "--id", str(internal), "--ed", str(external), ".neadic"]
        )

        assert result.exit_code != 0
        assert "Error:" in result.output
        assert "no basename" in result.output
        assert list(external.iterdir()) == []

    def test_unclassified_block_dropped_without_strict(self, dirs):
        internal, external = dirs
        (internal / "bad.neadic").write_text("NEA TPASS {\n    cat\n}\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--int", "--id", str(internal), "--ed", str(external), "bad"])

        assert result.exit_code == 0
        assert (external / "bad.dic").read_text() == "1\nthssntwd\n"

    def test_invalid_settings_abort(self, tmp_path):
        runner = CliRunner()
        with patch("neatest.cli.get_settings") as mock_settings:
            mock_settings.side_effect = ValidationError.from_exception_data(
                "Settings validation error",
                [{"type": "missing", "loc": ("EXT_TEST_DIR",), "msg": "Field required"}],
            )
            result = runner.invoke(main, ["--id", str(tmp_path), "affix1"])

        assert result.exit_code != 0
        assert "Invalid configuration" in result.output


class TestCLITestCommands:
    """Tests for test command invocation from the command line."""

    def test_trace_lines_and_commands(self, dirs):
        internal, external = dirs

        runner = CliRunner()
        with patch("neatest.batch.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            result = runner.invoke(
                main,
                [
                    "--id", str(internal),
                    "--ed", str(external),
                    "--ic", "neaspell --test",
                    "--ec", "hunspell-test",
                    "affix1",
                ],
            )

        assert result.exit_code == 0
        assert f"Executing neaspell --test {internal / 'affix1.neadic'}" in result.output
        assert f"Executing hunspell-test {external / 'affix1.dic'}" in result.output
        assert mock_run.call_count == 2

    def test_command_from_environment(self, dirs, monkeypatch):
        internal, external = dirs
        monkeypatch.setenv("INT_TEST_CMD", "neaspell --test")

        runner = CliRunner()
        with patch("neatest.batch.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            result = runner.invoke(main, ["--id", str(internal), "affix1"])

        assert result.exit_code == 0
        assert "Executing neaspell --test" in result.output

    def test_failing_command_sets_exit_status(self, dirs):
        internal, external = dirs

        runner = CliRunner()
        with patch("neatest.batch.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 1
            result = runner.invoke(
                main, ["--id", str(internal), "--ed", str(external), "--ec", "t", "affix1"]
            )

        assert result.exit_code == 1
