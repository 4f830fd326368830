"""Route table: URL path to shell command template.

The table is built once at startup, either from a CSV file of
``path,command`` rows or from a single static command, and is read-only
afterwards so request handlers can share it without locking.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from spuria.config.settings import RoutesConfig
from spuria.errors import ConfigurationError

logger = logging.getLogger(__name__)


class RouteTable:
    """Immutable mapping of URL path to command template."""

    def __init__(self, routes: Mapping[str, str] | None = None) -> None:
        self._routes: Mapping[str, str] = MappingProxyType(dict(routes or {}))

    @classmethod
    def from_csv(cls, text: str) -> RouteTable:
        """Build a table from CSV text.

        Rows with an empty path or command are skipped with a warning.
        Blank lines are ignored.

        Raises:
            ConfigurationError: If the CSV cannot be parsed or a row does
                not have exactly two fields.
        """
        routes: dict[str, str] = {}
        reader = csv.reader(io.StringIO(text))
        try:
            for row in reader:
                if not row:
                    continue
                if len(row) != 2:
                    raise ConfigurationError(
                        f"Route file line {reader.line_num}: expected 2 fields, got {len(row)}"
                    )
                path, command = row
                if path == "":
                    logger.warning("Skipping row because of missing URL (line=%d)", reader.line_num)
                    continue
                if command == "":
                    logger.warning("Skipping row because of missing command (line=%d)", reader.line_num)
                    continue
                routes[path] = command
        except csv.Error as e:
            raise ConfigurationError(f"Error parsing route file: {e}") from e
        return cls(routes)

    @classmethod
    def static(cls, command: str, path: str = "/do") -> RouteTable:
        return cls({path: command})

    def lookup(self, path: str) -> str | None:
        return self._routes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({len(self._routes)} routes)"


def load_routes(config: RoutesConfig) -> RouteTable:
    """Build the route table described by the routes config section.

    A static command takes precedence and disables the CSV file.

    Raises:
        ConfigurationError: If neither source is configured, or the CSV
            file is missing or malformed.
    """
    if config.static_command:
        logger.info("Static command mode: %s -> %s", config.static_path, config.static_command)
        return RouteTable.static(config.static_command, config.static_path)

    if not config.file:
        raise ConfigurationError("Please provide either a route file or a static command")

    path = Path(config.file)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Couldn't read route file {path}: {e}") from e

    table = RouteTable.from_csv(text)
    logger.info("Loaded %d routes from %s", len(table), path)
    return table
