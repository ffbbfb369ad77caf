"""
Shell command runner with a time-based progress indicator.

Every security tool goes through CommandRunner.run: the command text is
recorded in the execution log, the process is spawned through the host
shell, and a progress bar advances against the tool's estimated run time
until the process exits.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from rich.console import Console

from secproto.config import DEFAULT_ESTIMATED_DURATION_MS
from secproto.console import console as default_console
from secproto.logging_config import log_command, log_command_result
from secproto.progress import (
    MAX_SYNTHETIC_PROGRESS,
    ProgressDisplay,
    rich_progress_factory,
    synthetic_progress,
)
from secproto.reporting import ExecutionLog


class ProcessError(Exception):
    """Raised when a command exits non-zero or cannot be spawned."""

    def __init__(
        self,
        command: str,
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        if returncode is None:
            message = f"Command could not be started: {command} ({stderr.strip()})"
        else:
            message = f"Command failed with exit code {returncode}: {command}"
            if stderr.strip():
                message += f"\n{stderr.strip()}"
        super().__init__(message)


@dataclass
class CommandOutput:
    """Captured output of a successful command."""
    stdout: str
    stderr: str
    duration_ms: int


ProgressFactory = Callable[[str], ProgressDisplay]


class CommandRunner:
    """Runs one shell command at a time, writing its trace to the execution log."""

    def __init__(
        self,
        log: ExecutionLog,
        console: Optional[Console] = None,
        progress_factory: Optional[ProgressFactory] = None,
        progress_interval_ms: int = 100,
    ):
        self.log = log
        self.console = console or default_console
        self.progress_factory = progress_factory or rich_progress_factory(self.console)
        self.progress_interval = progress_interval_ms / 1000

    async def run(
        self,
        command: str,
        estimated_duration_ms: int = DEFAULT_ESTIMATED_DURATION_MS,
    ) -> CommandOutput:
        """
        Run a shell command and wait for it to exit.

        There is no timeout: a command that never exits keeps the caller
        waiting with the progress bar held at 99%.

        Args:
            command: Command line, passed to the host shell as-is
            estimated_duration_ms: Expected run time driving the progress bar

        Returns:
            CommandOutput with stdout, stderr and wall-clock duration

        Raises:
            ProcessError: If the command exits non-zero or cannot be spawned
        """
        self.console.print(f"Executing: {command}", markup=False)
        self.log.append(f"\nExecuting: {command}\n")
        log_command(command, estimated_duration_ms)

        display = self.progress_factory(command)
        display.start()

        finished = asyncio.Event()
        start_time = time.monotonic()
        ticker = asyncio.create_task(
            self._drive_progress(display, start_time, estimated_duration_ms, finished)
        )

        try:
            try:
                returncode, stdout, stderr = await self._spawn(command)
            finally:
                finished.set()
                await ticker

            duration_ms = int((time.monotonic() - start_time) * 1000)
            display.update(100)
        finally:
            # Always release the terminal, even when interrupted
            display.stop()

        self.log.append(f"Command output:\n{stdout}\n{stderr}\n")
        self.log.append(f"Command completed in {duration_ms}ms\n")
        log_command_result(command, returncode, stderr, duration_ms)

        outcome = "successfully" if returncode == 0 else "with errors"
        self.console.print(f"Command {command} completed {outcome}.", markup=False)

        if returncode != 0:
            raise ProcessError(command, returncode, stdout, stderr)

        return CommandOutput(stdout=stdout, stderr=stderr, duration_ms=duration_ms)

    async def _spawn(self, command: str) -> Tuple[Optional[int], str, str]:
        """Spawn the command through the shell and collect its output."""
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return None, "", str(e)

        stdout_data, stderr_data = await process.communicate()
        stdout = stdout_data.decode(errors="replace") if stdout_data else ""
        stderr = stderr_data.decode(errors="replace") if stderr_data else ""
        return process.returncode, stdout, stderr

    async def _drive_progress(
        self,
        display: ProgressDisplay,
        start_time: float,
        estimated_duration_ms: int,
        finished: asyncio.Event,
    ) -> None:
        """Advance the progress bar until it hits 99% or the process exits."""
        while not finished.is_set():
            elapsed_ms = (time.monotonic() - start_time) * 1000
            progress = synthetic_progress(elapsed_ms, estimated_duration_ms)
            display.update(progress)

            if progress >= MAX_SYNTHETIC_PROGRESS:
                return

            try:
                await asyncio.wait_for(finished.wait(), timeout=self.progress_interval)
            except asyncio.TimeoutError:
                pass
