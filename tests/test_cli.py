import pytest

from restman import __version__
from restman.cli import build_parser, main


def test_parser_options() -> None:
    args = build_parser().parse_args(["--data-dir", "/tmp/rm", "--log-level", "debug"])
    assert args.data_dir == "/tmp/rm"
    assert args.log_level == "debug"

    args = build_parser().parse_args([])
    assert args.data_dir is None
    assert args.log_level is None


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_invalid_log_level_exits_before_starting(tmp_path, capsys) -> None:
    assert main(["--data-dir", str(tmp_path), "--log-level", "LOUD"]) == 2
    assert "invalid configuration" in capsys.readouterr().err
