"""Runs external tools (package manager, deploy CLI) as child processes."""

import asyncio
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from spinup.core.exceptions import CommandFailure, SpawnFailure
from spinup.utils.logging import get_logger


class CommandRunner:
    """Spawns one external process per call and waits for it to exit.

    The child inherits this process's stdin, stdout and stderr so tool output
    is streamed live rather than buffered.
    """

    def __init__(self):
        self.logger = get_logger("runner")

    async def run(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Run ``command`` with ``args`` to completion.

        Args:
            command: Executable name or path
            args: Arguments passed to the executable (no shell parsing)
            cwd: Working directory for the child
            env: Variables overlaid on the inherited environment

        Raises:
            SpawnFailure: If the executable cannot be launched
            CommandFailure: If the process exits with a non-zero status
        """
        workdir = str(Path(cwd).resolve()) if cwd is not None else None
        child_env = {**os.environ, **env} if env else None

        self.logger.info(
            "command.running",
            cmd=" ".join([command, *args]),
            cwd=workdir,
        )

        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                cwd=workdir,
                env=child_env,
            )
        except OSError as e:
            self.logger.error("command.spawn_failed", command=command, error=str(e))
            raise SpawnFailure(command, e) from e

        returncode = await process.wait()

        if returncode != 0:
            self.logger.error(
                "command.failed",
                command=command,
                exit_code=returncode,
            )
            raise CommandFailure(command, args, returncode)

        self.logger.info("command.completed", command=command)
