"""
Tests for the command-line tools (issue_token, scan_url).
"""

from __future__ import annotations

import json

import pytest

from backend_safespace.api_server.auth import verify_token
from backend_safespace.config import env
from backend_safespace.tools import issue_token as issue_token_tool
from backend_safespace.tools import scan_url as scan_url_tool

from conftest import TEST_JWT_SECRET, USER_ID


@pytest.fixture
def tool_env(monkeypatch):
    monkeypatch.setattr(env, "load_safespace_env", lambda: None)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)


def test_issue_token_prints_valid_token(tool_env, capsys):
    assert issue_token_tool.main([USER_ID, "--expires-in", "120"]) == 0
    token = capsys.readouterr().out.strip()
    assert verify_token(token, TEST_JWT_SECRET) == USER_ID


def test_issue_token_refuses_fallback_secret_in_production(tool_env, monkeypatch, capsys):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("JWT_SECRET")
    assert issue_token_tool.main([USER_ID]) == 1
    assert "JWT_SECRET" in capsys.readouterr().err


def test_scan_url_exit_codes(capsys):
    assert scan_url_tool.main(["https://example.com"]) == 0
    line = json.loads(capsys.readouterr().out.strip())
    assert line["url"] == "https://example.com"
    assert line["isSafe"] is True

    assert scan_url_tool.main(["https://example.com", "http://scam.tk"]) == 2
    lines = [json.loads(x) for x in capsys.readouterr().out.splitlines()]
    assert [x["riskScore"] for x in lines] == [0, 75]

    assert scan_url_tool.main(["ftp://example.com"]) == 1
    assert "scheme" in capsys.readouterr().err
