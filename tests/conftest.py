"""Shared test fixtures for the spuria test suite.

Provides route tables, settings, dispatchers built from them, and a
helper for building request snapshots.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterator

import pytest

from spuria.config.settings import Settings
from spuria.domain.models import RequestInfo
from spuria.gateway.dispatcher import Dispatcher
from spuria.routes import RouteTable


# ---------------------------------------------------------------------------
# Routes / Settings Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def route_table() -> RouteTable:
    """A small table with a passing, a failing and a templated command."""
    return RouteTable(
        {
            "/ping": "echo hello",
            "/fail": "echo broken >&2; exit 1",
            "/greet": "echo hi $name",
        }
    )


@pytest.fixture
def validation_pattern() -> re.Pattern[str]:
    return re.compile(r"^[a-zA-Z0-9/-]*$")


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings with per-section overrides and whitelisting off."""

    def _make(**sections: dict[str, Any]) -> Settings:
        data: dict[str, Any] = {"access": {"allowed_ips": []}}
        for name, values in sections.items():
            data[name] = {**data.get(name, {}), **values}
        return Settings(**data)

    return _make


@pytest.fixture
def make_dispatcher(
    route_table: RouteTable, make_settings: Callable[..., Settings]
) -> Callable[..., Dispatcher]:
    """Build a Dispatcher over ``route_table`` from section overrides."""

    def _make(routes: RouteTable | None = None, **sections: dict[str, Any]) -> Dispatcher:
        return Dispatcher.from_settings(make_settings(**sections), routes or route_table)

    return _make


# ---------------------------------------------------------------------------
# Request Fixtures
# ---------------------------------------------------------------------------


def make_request(path: str, query: tuple[tuple[str, str], ...] = (), **kwargs: Any) -> RequestInfo:
    """A GET request from 127.0.0.1 unless overridden."""
    values: dict[str, Any] = {
        "method": "GET",
        "path": path,
        "query": query,
        "client_host": "127.0.0.1",
        "client_port": 50000,
        "host": "localhost:4870",
        "user_agent": "pytest",
    }
    values.update(kwargs)
    return RequestInfo(**values)


@pytest.fixture(autouse=True)
def reset_spuria_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging so they don't outlive a test."""
    logger = logging.getLogger("spuria")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    logger.setLevel(level)
