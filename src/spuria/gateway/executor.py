"""Command execution in a shell subprocess.

Each command runs as ``<shell> -c <command>`` with stdout and stderr
captured separately. There is no timeout: a hung command holds its
request until it exits.
"""

from __future__ import annotations

import asyncio
import logging
import time

from spuria.domain.models import ExecutionResult

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Runs resolved command lines through a shell interpreter."""

    def __init__(self, shell: str = "bash") -> None:
        self._shell = shell

    async def execute(self, command: str, path: str = "") -> ExecutionResult:
        """Run ``command`` and wait for it to exit.

        Never raises for command failures: a nonzero exit or a spawn
        failure is reported through ``ExecutionResult.error``.
        """
        start = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                self._shell,
                "-c",
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            duration = time.monotonic() - start
            logger.error(
                "execution error (path=%s duration=%.3fs err=%s)", path, duration, e
            )
            return ExecutionResult(command=command, error=str(e), duration=duration)

        out, err = await process.communicate()
        duration = time.monotonic() - start
        stdout = out.decode("utf-8", errors="replace")
        stderr = err.decode("utf-8", errors="replace")

        if process.returncode != 0:
            error = f"exit status {process.returncode}"
            logger.error(
                "execution error (path=%s duration=%.3fs stdout=%r stderr=%r err=%s)",
                path, duration, stdout, stderr, error,
            )
            return ExecutionResult(
                command=command,
                error=error,
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr,
                duration=duration,
            )

        logger.info(
            "execution success (path=%s duration=%.3fs stdout=%r stderr=%r)",
            path, duration, stdout, stderr,
        )
        return ExecutionResult(
            command=command,
            returncode=0,
            stdout=stdout,
            stderr=stderr,
            duration=duration,
        )
