"""
Watchrun Command Supervisor.

Runs the configured command synchronously in a subshell and forwards
its captured output once it has exited.
Requires Python 3.11+.
"""

import subprocess
import sys
import time
from dataclasses import dataclass
from typing import BinaryIO

from watchrun.utils.logger import LoggerMixin

CLEAR = "\x1b[2J\x1b[1;1H"


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of one command execution.

    Attributes:
        stdout: Everything the command wrote to standard output
        stderr: Everything the command wrote to standard error
        spawned: False if the subshell could not be started
        returncode: Exit status, or None if never spawned
        duration_ms: Wall-clock time spent in the run
    """

    stdout: bytes
    stderr: bytes
    spawned: bool
    returncode: int | None
    duration_ms: float

    def __repr__(self) -> str:
        if not self.spawned:
            return "<RunResult not spawned>"
        return f"<RunResult exit={self.returncode}, {len(self.stdout)}B out, {len(self.stderr)}B err>"


class CommandSupervisor(LoggerMixin):
    """
    Executes one shell command line, one run at a time.

    Output is buffered until the command exits and then written in
    full: stdout first, then stderr. Exit codes are recorded but not
    interpreted.
    """

    def __init__(
        self,
        command: str,
        shell: str = "sh",
        clear_screen: bool = True,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
    ) -> None:
        """
        Initialize the supervisor.

        Args:
            command: Shell command line passed to ``shell -c``
            shell: Command interpreter to spawn
            clear_screen: Emit the clear sequence before each run
            stdout: Binary stream for command output; sys.stdout by default
            stderr: Binary stream for command errors; sys.stderr by default
        """
        self._command = command
        self._shell = shell
        self._clear_screen = clear_screen
        self._stdout = stdout
        self._stderr = stderr

    @property
    def command(self) -> str:
        """The command line being supervised."""
        return self._command

    @property
    def argv(self) -> list[str]:
        """Argument vector used to spawn the subshell."""
        return [self._shell, "-c", self._command]

    def _out(self) -> BinaryIO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    def _err(self) -> BinaryIO:
        return self._stderr if self._stderr is not None else sys.stderr.buffer

    def run(self, announce: bool = False) -> RunResult:
        """
        Clear the display, run the command and forward its output.

        Args:
            announce: Also print the command line after clearing

        Returns:
            RunResult for this execution; spawn failures are logged, not raised
        """
        out = self._out()
        if self._clear_screen:
            out.write(CLEAR.encode() + b"\n")
        if announce:
            out.write(self._command.encode() + b"\n")
        out.flush()

        start_time = time.perf_counter()
        try:
            completed = subprocess.run(self.argv, capture_output=True)
        except OSError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.log.warning(
                "command_spawn_failed",
                shell=self._shell,
                command=self._command,
                error=str(e),
            )
            return RunResult(
                stdout=b"",
                stderr=b"",
                spawned=False,
                returncode=None,
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000

        out.write(completed.stdout)
        out.flush()
        err = self._err()
        err.write(completed.stderr)
        err.flush()

        self.log.debug(
            "command_finished",
            returncode=completed.returncode,
            duration_ms=round(duration_ms, 1),
        )

        return RunResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            spawned=True,
            returncode=completed.returncode,
            duration_ms=duration_ms,
        )
