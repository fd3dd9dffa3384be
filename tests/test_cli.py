"""Tests for the command-line interface."""

from __future__ import annotations

import json
import re
import time

import pytest
from click.testing import CliRunner

from lonewolf_auth.cli import EXIT_ERROR, EXIT_REJECTED, main

RFC_SECRET = "12345678901234567890"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def frozen_time(monkeypatch):
    monkeypatch.setattr(time, "time", lambda: 59.0)


def test_secret(runner):
    result = runner.invoke(main, ["secret"])
    assert result.exit_code == 0
    assert re.fullmatch(r"[0-9a-f]{64}\n", result.output)


def test_enroll_json(runner):
    result = runner.invoke(main, ["enroll", "alice", "--issuer", "Acme", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert re.fullmatch(r"[0-9a-f]{64}", data["secret"])
    assert data["uri"].startswith("otpauth://totp/Acme:alice?")
    assert data["qr_code"]


def test_enroll_writes_qr(runner, tmp_path):
    out = tmp_path / "qr.png"
    result = runner.invoke(main, ["enroll", "alice", "--qr-out", str(out)])
    assert result.exit_code == 0
    assert "Secret:" in result.output
    assert out.read_bytes().startswith(b"\x89PNG\r\n\x1a\n")


def test_enroll_uses_default_issuer(runner, monkeypatch):
    from lonewolf_auth.config import Settings

    monkeypatch.setattr("lonewolf_auth.config.settings", Settings(_env_file=None, mfa_default_issuer="Acme"))
    result = runner.invoke(main, ["enroll", "alice", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["uri"].startswith("otpauth://totp/Acme:alice?")


def test_enroll_invalid_label(runner):
    result = runner.invoke(main, ["enroll", "alice:admin"])
    assert result.exit_code == EXIT_ERROR


def test_code(runner, frozen_time):
    result = runner.invoke(main, ["code", RFC_SECRET])
    assert result.exit_code == 0
    assert "287082" in result.output
    assert "valid for 1s" in result.output


def test_verify_accepts(runner, frozen_time):
    result = runner.invoke(main, ["verify", "287082", RFC_SECRET])
    assert result.exit_code == 0
    assert "Code verified" in result.output


def test_verify_rejects(runner, frozen_time):
    result = runner.invoke(main, ["verify", "359152", RFC_SECRET])
    assert result.exit_code == EXIT_REJECTED
    assert "Code rejected" in result.output


def test_verify_window_option(runner, frozen_time):
    result = runner.invoke(main, ["verify", "359152", RFC_SECRET, "--window", "1"])
    assert result.exit_code == 0


def test_verify_bad_secret(runner):
    result = runner.invoke(main, ["verify", "123456", "abc"])
    assert result.exit_code == EXIT_ERROR


def test_settings(runner):
    result = runner.invoke(main, ["settings"])
    assert result.exit_code == 0
    assert "Valid window" in result.output
