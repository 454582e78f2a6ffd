"""
Interactive process session.

Drives a long-running, prompt-driven command-line process (such as the
sqlite3 shell) as a synchronous request/response service over its standard
streams. Each command is followed by a sentinel statement whose output, the
end marker, tells the session that the command's response is complete.

Teardown requests a graceful exit, drains stderr, and waits for the process
with a bounded timeout before killing it, so a session never leaks an OS
process.
"""

from __future__ import annotations

import contextlib
import enum
import logging
import subprocess
from pathlib import Path
from typing import IO, Any

from ..exceptions import (
    ExecError,
    IncompleteOutputError,
    ShutdownHangError,
    SpawnError,
)
from ..log import Logger, LoggerFactory
from ..time import Clock, SystemClock, is_timed_out
from .config import SessionConfig

# Seconds to wait for a killed process to be reaped
_KILL_REAP_TIMEOUT = 5.0


def should_log_error(success: bool, stderr_empty: bool) -> bool:
    """
    Decide whether a finished process deserves a warning.

    Only a failed exit that left something on stderr is reported. A failure
    with nothing to show, or a success with chatter on stderr, is not.

    Args:
        success: Whether the process exited with status 0
        stderr_empty: Whether the captured stderr output is empty
    """
    return not success and not stderr_empty


class SessionState(enum.Enum):
    """Binding of a session to its OS process."""

    RUNNING = "running"
    EXITED = "exited"
    KILLED = "killed"
    QUERY_FAILED = "query_failed"


class InteractiveSession:
    """
    Owned wrapper around one spawned interactive process.

    The protocol is strictly half-duplex: execute() writes a command and the
    sentinel statement, then reads until the end marker. Only one command is
    ever in flight.

    Use as a context manager so the shutdown sequence runs on every exit
    path:

        with InteractiveSession(db_path) as session:
            out = session.execute("SELECT 1 + 1;")

    close() may also be called directly; it runs the shutdown sequence once
    and is a no-op afterwards.

    Limitations: the end marker text is reserved and may not appear in a
    command. stderr is only read during close(), so commands that write more
    error text than the pipe buffer holds (about 64 KB on Linux) block the
    process, and execute() then waits on stdout indefinitely.

    Args:
        target_path: Path passed to the program as its only argument
        lg: Logger; a derived child logger is used for session messages
        config: Session settings (program, marker, shutdown timeout, ...)
        clock: Time source for the shutdown timeout
    """

    def __init__(
        self,
        target_path: str | Path,
        lg: Logger | None = None,
        config: SessionConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config if config is not None else SessionConfig()
        self._clock = clock if clock is not None else SystemClock()
        self._path = Path(target_path)
        self._lg: Any = lg if lg is not None else logging.getLogger(__name__)
        if isinstance(lg, Logger):
            self._lg = LoggerFactory.derive(lg, self._log_tag())

        proc = self._spawn()
        self._proc: subprocess.Popen[bytes] | None = proc
        self._stdin: IO[bytes] | None = proc.stdin
        self._stdout: IO[bytes] | None = proc.stdout
        self._stderr: IO[bytes] | None = proc.stderr
        self._closed = False
        self.state = SessionState.RUNNING
        self.returncode: int | None = None
        self.stderr_output = ""

        self._lg.debug("spawned", extra={"pid": proc.pid, "path": str(self._path)})

    def _log_tag(self) -> str:
        return Path(self._config.program).name or "session"

    def _spawn(self) -> subprocess.Popen[bytes]:
        """Launch the process with all three streams piped."""
        program = self._config.program
        try:
            proc = subprocess.Popen(
                [program, str(self._path)],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(f"Failed to spawn {program}: {e}", path=self._path) from e

        for name in ("stdin", "stdout", "stderr"):
            if getattr(proc, name) is None:
                self._discard(proc)
                raise SpawnError(f"Failed to get {name} handle", path=self._path)
        return proc

    @staticmethod
    def _discard(proc: subprocess.Popen[bytes]) -> None:
        """Kill and reap a process that never became a session."""
        with contextlib.suppress(OSError):
            proc.kill()
        with contextlib.suppress(OSError, subprocess.TimeoutExpired):
            proc.wait(timeout=_KILL_REAP_TIMEOUT)

    @property
    def path(self) -> Path:
        """Path the process was launched against."""
        return self._path

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def pid(self) -> int | None:
        """OS process id, or None once the process has been reaped."""
        return self._proc.pid if self._proc is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    def take_stdin(self) -> IO[bytes] | None:
        """Move the stdin handle out of the session. Later writes fail."""
        handle, self._stdin = self._stdin, None
        return handle

    def take_stdout(self) -> IO[bytes] | None:
        """Move the stdout handle out of the session. Later reads fail."""
        handle, self._stdout = self._stdout, None
        return handle

    def take_stderr(self) -> IO[bytes] | None:
        """Move the stderr handle out of the session; close() will not drain it."""
        handle, self._stderr = self._stderr, None
        return handle

    def _require(self, handle: IO[bytes] | None, name: str) -> IO[bytes]:
        if self._closed:
            raise ExecError("session is closed", path=self._path)
        if handle is None:
            raise ExecError(f"{name} is not available", path=self._path)
        return handle

    def _write_line(self, stdin: IO[bytes], text: str, what: str) -> None:
        data = (text + "\n").encode(self._config.encoding)
        try:
            stdin.write(data)
        except (OSError, ValueError) as e:
            raise ExecError(f"Failed to write {what}: {e}", path=self._path) from e
        try:
            stdin.flush()
        except (OSError, ValueError) as e:
            raise ExecError(f"Failed to flush {what}: {e}", path=self._path) from e

    def execute(self, command: str) -> str:
        """
        Execute a command and return its output.

        Args:
            command: Command text, without trailing newline. Must be complete:
                SQL ending in ";" or a dot-command such as ".tables". An
                unterminated statement would swallow the sentinel and no
                marker would ever arrive. Must not contain the reserved end
                marker.

        Returns:
            Every output line produced before the end marker, in order, with
            line terminators preserved and the sentinel echo removed.

        Raises:
            ExecError: A handle is unavailable, the command is incomplete or
                contains the marker, or a write, flush or read failed.
            IncompleteOutputError: The output stream ended before the marker.
        """
        marker = self._config.marker
        statement = self._config.marker_statement
        if marker in command:
            raise ExecError("command contains the reserved end marker", marker=marker)

        stripped = command.strip()
        if not (stripped.endswith(";") or stripped.startswith(".")):
            raise ExecError(
                "command must end in ';' or be a dot-command", command=command
            )

        stdin = self._require(self._stdin, "stdin")
        stdout = self._require(self._stdout, "stdout")

        self._write_line(stdin, command, "command")
        self._write_line(stdin, statement, "marker")

        lines: list[str] = []
        while True:
            try:
                raw = stdout.readline()
            except (OSError, ValueError) as e:
                raise ExecError(f"Failed to read: {e}", path=self._path) from e
            if not raw:
                raise IncompleteOutputError(
                    "Failed to read complete output", path=self._path
                )

            line = raw.decode(self._config.encoding, errors="replace")
            if statement in line:
                continue
            if marker in line:
                break
            lines.append(line)

        return "".join(lines)

    def close(self) -> None:
        """
        Run the shutdown sequence once.

        1. Send the exit directive if stdin is still held (errors ignored).
        2. Drain stderr if still held.
        3. Poll for exit until the shutdown timeout, then kill.

        Raises:
            ShutdownHangError: The process outlived the shutdown timeout and
                config.abort_on_hang is set. The process has been killed.
        """
        if self._closed:
            return
        self._closed = True

        try:
            self._request_exit()
            self.stderr_output = self._drain_stderr()
            self._wait_for_exit()
        finally:
            stdout, self._stdout = self._stdout, None
            if stdout is not None:
                with contextlib.suppress(OSError):
                    stdout.close()

    def _request_exit(self) -> None:
        stdin, self._stdin = self._stdin, None
        if stdin is None:
            return
        # The process may already be gone
        with contextlib.suppress(OSError, ValueError):
            stdin.write((self._config.exit_directive + "\n").encode(self._config.encoding))
            stdin.flush()
        with contextlib.suppress(OSError, ValueError):
            stdin.close()

    def _drain_stderr(self) -> str:
        stderr, self._stderr = self._stderr, None
        if stderr is None:
            return ""
        data = b""
        try:
            data = stderr.read()
        except (OSError, ValueError) as e:
            self._lg.debug("failed to read stderr", extra={"error": e})
        finally:
            with contextlib.suppress(OSError):
                stderr.close()
        return data.decode(self._config.encoding, errors="replace")

    def _wait_for_exit(self) -> None:
        proc = self._proc
        if proc is None:
            return

        timeout = self._config.shutdown_timeout
        start_t = self._clock.now()
        while True:
            try:
                returncode = proc.poll()
            except OSError as e:
                self._lg.error(
                    "error waiting for process", extra={"pid": proc.pid, "error": e}
                )
                self._kill(proc)
                self.state = SessionState.QUERY_FAILED
                return

            if returncode is not None:
                self._proc = None
                self.returncode = returncode
                self.state = SessionState.EXITED
                if should_log_error(returncode == 0, not self.stderr_output):
                    self._lg.warning(
                        "process exited with error",
                        extra={"status": returncode, "stderr": self.stderr_output},
                    )
                else:
                    self._lg.debug("exited", extra={"status": returncode})
                return

            if is_timed_out(self._clock.since(start_t), timeout):
                self._lg.error(
                    f"process failed to exit within {timeout:g} seconds",
                    extra={"pid": proc.pid, "path": str(self._path)},
                )
                self._kill(proc)
                self.state = SessionState.KILLED
                if self._config.abort_on_hang:
                    raise ShutdownHangError(self._path, timeout, self._log_tag())
                return

            self._clock.sleep(self._config.poll_interval)

    def _kill(self, proc: subprocess.Popen[bytes]) -> None:
        with contextlib.suppress(OSError):
            proc.kill()
        try:
            self.returncode = proc.wait(timeout=_KILL_REAP_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            self._lg.error("killed process was not reaped", extra={"error": e})
            return
        self._proc = None

    def __enter__(self) -> InteractiveSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(path={str(self._path)!r}, "
            f"state={self.state.value})"
        )
