"""
Tests for bearer token issue/verify (api_server.auth).
"""

from __future__ import annotations

import time

import jwt
import pytest

from backend_safespace.api_server.auth import issue_token, verify_token
from backend_safespace.core.exceptions import Unauthorized

from conftest import TEST_JWT_SECRET, USER_ID


def test_issue_and_verify_round_trip():
    token = issue_token(USER_ID, TEST_JWT_SECRET)
    assert verify_token(token, TEST_JWT_SECRET) == USER_ID


def test_claims_layout():
    token = issue_token(USER_ID, TEST_JWT_SECRET, expires_in_sec=60, now=1_700_000_000)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims == {"id": USER_ID, "iat": 1_700_000_000, "exp": 1_700_000_060}


def test_empty_user_id_rejected():
    with pytest.raises(ValueError):
        issue_token("  ", TEST_JWT_SECRET)


def test_wrong_secret_fails():
    token = issue_token(USER_ID, "another-secret-0123456789abcdefghij")
    with pytest.raises(Unauthorized, match="token failed"):
        verify_token(token, TEST_JWT_SECRET)


def test_expired_token():
    token = issue_token(USER_ID, TEST_JWT_SECRET, expires_in_sec=5, now=int(time.time()) - 60)
    with pytest.raises(Unauthorized) as exc:
        verify_token(token, TEST_JWT_SECRET)
    assert exc.value.message == "Not authorized, token expired"
    assert exc.value.status_code == 401


def test_missing_token():
    with pytest.raises(Unauthorized, match="no token"):
        verify_token("", TEST_JWT_SECRET)


def test_token_without_exp_or_id_fails():
    no_exp = jwt.encode({"id": USER_ID}, TEST_JWT_SECRET, algorithm="HS256")
    with pytest.raises(Unauthorized, match="token failed"):
        verify_token(no_exp, TEST_JWT_SECRET)

    no_id = jwt.encode({"exp": int(time.time()) + 60}, TEST_JWT_SECRET, algorithm="HS256")
    with pytest.raises(Unauthorized, match="token failed"):
        verify_token(no_id, TEST_JWT_SECRET)
