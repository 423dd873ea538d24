"""Tests for the command-line front end and environment settings."""

import pytest
from main import run_cli, EXIT_OK, EXIT_UNSATISFIABLE, EXIT_ERROR
from utils.settings import load_settings


def test_synthetic_run_writes_output(tmp_path, capsys):
    out = tmp_path / "out.jpg"
    code = run_cli(["--synthetic", "gradient", "--size", "256", "-o", str(out)])
    assert code == EXIT_OK
    assert out.read_bytes()[:2] == b'\xff\xd8'
    assert "=== Results ===" in capsys.readouterr().out


def test_unsatisfiable_budget_still_writes_best_effort(tmp_path):
    out = tmp_path / "noise.jpg"
    code = run_cli(["--synthetic", "noise", "--size", "256", "--max-bytes", "300", "-o", str(out)])
    assert code == EXIT_UNSATISFIABLE
    assert out.exists()


def test_invalid_budget_flag(tmp_path):
    code = run_cli(["--synthetic", "gradient", "--size", "64", "--max-bytes", "0",
                    "-o", str(tmp_path / "x.jpg")])
    assert code == EXIT_ERROR


def test_missing_input_is_error(tmp_path):
    assert run_cli(["-o", str(tmp_path / "x.jpg")]) == EXIT_ERROR
    assert run_cli([str(tmp_path / "missing.png")]) == EXIT_ERROR


def test_file_input_with_dct_codec(tmp_path):
    from utils.image_io import encode_png, write_bytes
    from utils.test_images import generate_photo_like
    
    src = tmp_path / "in.png"
    write_bytes(encode_png(generate_photo_like(300, 200)), src)
    out = tmp_path / "out.bdct"
    assert run_cli([str(src), "--codec", "dct", "--preset", "profile_photo", "-o", str(out)]) == EXIT_OK
    assert out.read_bytes()[:4] == b'BDCT'


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("IMGBUDGET_CODEC", "pillow")
    monkeypatch.setenv("IMGBUDGET_MIN_DIMENSION", "128")
    monkeypatch.setenv("IMGBUDGET_QUALITY_STEP", "10")
    monkeypatch.setenv("IMGBUDGET_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.codec == "pillow"
    assert settings.log_level == "DEBUG"
    policy = settings.search_policy()
    assert policy.min_dimension == 128
    assert policy.quality_ladder(30) == (30, 20, 10, 1)


def test_settings_reject_non_integer(monkeypatch):
    monkeypatch.setenv("IMGBUDGET_MIN_DIMENSION", "big")
    with pytest.raises(ValueError):
        load_settings()


def test_clamped_input_with_dimension_fallback(tmp_path, capsys):
    """A 3000px source clamped to 1024 then halved still reports and saves."""
    out = tmp_path / "noise.jpg"
    code = run_cli(["--synthetic", "noise", "--size", "3000", "--max-bytes", "5000", "-o", str(out)])
    assert code in (EXIT_OK, EXIT_UNSATISFIABLE)
    assert out.read_bytes()[:2] == b'\xff\xd8'
    assert "=== Results ===" in capsys.readouterr().out


def test_large_input_unsatisfiable_writes_best_effort(tmp_path):
    out = tmp_path / "noise.jpg"
    code = run_cli(["--synthetic", "noise", "--size", "3000", "--max-bytes", "300", "-o", str(out)])
    assert code == EXIT_UNSATISFIABLE
    assert out.exists()
    assert len(out.read_bytes()) > 300


def test_invalid_log_level_is_settings_error(monkeypatch, tmp_path):
    monkeypatch.setenv("IMGBUDGET_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_settings()
    code = run_cli(["--synthetic", "gradient", "--size", "64", "-o", str(tmp_path / "x.jpg")])
    assert code == EXIT_ERROR
