from unittest.mock import patch

import pytest

from mercury_qa import cli


@pytest.fixture
def properties(tmp_path):
    path = tmp_path / "config.properties"
    path.write_text("browser=firefox\nheadless=true\nenvironment=qa\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_log_files():
    with patch.object(cli.GetLog, "get_log"):
        yield


def test_parse_args_global_config() -> None:
    args = cli.parse_args(["-c", "x.properties", "inspect", "--url", "https://cc", "--limit", "5"])
    assert args.config == "x.properties"
    assert args.url == "https://cc"
    assert args.limit == 5
    assert args.func is cli.cmd_inspect


def test_parse_args_requires_command() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_check_browsers_rejects_unknown_engine() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["check-browsers", "--engines", "safari"])


def test_config_command_prints_properties(properties, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(properties), "config"])
    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert f"Config file: {properties}" in out
    assert "browser=firefox" in out


def test_missing_config_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(tmp_path / "missing.properties"), "config"])
    assert excinfo.value.code == 1
    assert "Specified config file not found" in capsys.readouterr().err


def test_check_browsers_exit_code() -> None:
    with patch.object(cli, "check_playwright_browsers", side_effect=[True, False]) as check:
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["check-browsers", "--engines", "chromium", "firefox"])
    assert excinfo.value.code == 1
    assert [c.args[0] for c in check.call_args_list] == ["chromium", "firefox"]


def test_run_forwards_to_pytest(properties) -> None:
    with patch("pytest.main", return_value=0) as pytest_main:
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--config", str(properties), "run", "-k", "login"])
    assert excinfo.value.code == 0
    pytest_main.assert_called_once_with(["--run-e2e", "--config", str(properties), "-k", "login"])


def test_run_defaults_to_e2e_suite() -> None:
    args = cli.parse_args(["run"])
    with patch("pytest.main", return_value=5) as pytest_main:
        assert cli.cmd_run(args) == 5
    pytest_main.assert_called_once_with(["--run-e2e", "tests/e2e"])
