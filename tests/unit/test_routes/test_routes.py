"""Tests for RouteTable construction and loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from spuria.config.settings import RoutesConfig
from spuria.errors import ConfigurationError
from spuria.routes import RouteTable, load_routes


class TestRouteTable:
    def test_lookup_exact_path(self) -> None:
        table = RouteTable({"/ping": "echo hello"})
        assert table.lookup("/ping") == "echo hello"
        assert table.lookup("/ping/") is None
        assert table.lookup("/PING") is None

    def test_read_only(self) -> None:
        source = {"/a": "true"}
        table = RouteTable(source)
        source["/b"] = "false"
        assert "/b" not in table
        with pytest.raises(TypeError):
            table._routes["/c"] = "x"  # type: ignore[index]

    def test_static(self) -> None:
        table = RouteTable.static("echo hi")
        assert list(table) == ["/do"]
        assert table.lookup("/do") == "echo hi"


class TestFromCsv:
    def test_parses_rows(self) -> None:
        table = RouteTable.from_csv('/a,echo a\n/b,"echo ""quoted"", b"\n')
        assert len(table) == 2
        assert table.lookup("/b") == 'echo "quoted", b'

    def test_blank_lines_ignored(self) -> None:
        table = RouteTable.from_csv("/a,echo a\n\n/b,echo b\n")
        assert len(table) == 2

    def test_empty_fields_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="spuria"):
            table = RouteTable.from_csv(",echo orphan\n/empty,\n/ok,true\n")
        assert list(table) == ["/ok"]
        messages = [r.getMessage() for r in caplog.records]
        assert any("missing URL" in m for m in messages)
        assert any("missing command" in m for m in messages)

    def test_later_row_wins(self) -> None:
        table = RouteTable.from_csv("/a,first\n/a,second\n")
        assert table.lookup("/a") == "second"

    @pytest.mark.parametrize("text", ["/a\n", "/a,b,c\n"])
    def test_wrong_field_count_is_malformed(self, text: str) -> None:
        with pytest.raises(ConfigurationError):
            RouteTable.from_csv(text)


class TestLoadRoutes:
    def test_static_command_disables_file(self, tmp_path: Path) -> None:
        csv_file = tmp_path / "routes.csv"
        csv_file.write_text("/a,echo a\n")
        table = load_routes(RoutesConfig(file=str(csv_file), static_command="echo hi"))
        assert list(table) == ["/do"]

    def test_static_path_configurable(self) -> None:
        table = load_routes(RoutesConfig(static_command="echo hi", static_path="/run"))
        assert table.lookup("/run") == "echo hi"

    def test_loads_csv_file(self, tmp_path: Path) -> None:
        csv_file = tmp_path / "routes.csv"
        csv_file.write_text("/ping,echo hello\n/fail,exit 1\n")
        table = load_routes(RoutesConfig(file=str(csv_file)))
        assert table.lookup("/fail") == "exit 1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_routes(RoutesConfig(file=str(tmp_path / "missing.csv")))

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.csv"
        path.write_bytes(b"/a,\xff\xfe\n")
        with pytest.raises(ConfigurationError):
            load_routes(RoutesConfig(file=str(path)))

    def test_no_source(self) -> None:
        with pytest.raises(ConfigurationError):
            load_routes(RoutesConfig())
