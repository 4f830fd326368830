"""Tests for the source-address AuthorizationFilter."""

from __future__ import annotations

from spuria.gateway.auth import AuthorizationFilter


class TestAuthorizationFilter:
    def test_empty_allow_set_allows_everyone(self) -> None:
        auth = AuthorizationFilter()
        assert auth.is_allowed("203.0.113.9") is True
        assert auth.is_allowed("") is True

    def test_member_is_allowed(self) -> None:
        auth = AuthorizationFilter(["127.0.0.1", "10.0.0.5"])
        assert auth.is_allowed("10.0.0.5") is True

    def test_non_member_is_denied(self) -> None:
        auth = AuthorizationFilter(["127.0.0.1"])
        assert auth.is_allowed("127.0.0.2") is False

    def test_no_cidr_matching(self) -> None:
        auth = AuthorizationFilter(["10.0.0.0/8"])
        assert auth.is_allowed("10.1.2.3") is False

    def test_exact_string_match_only(self) -> None:
        auth = AuthorizationFilter(["::1"])
        assert auth.is_allowed("0:0:0:0:0:0:0:1") is False
        assert auth.is_allowed("::1") is True
