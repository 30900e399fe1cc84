"""Running a PostgreSQL server for the lifetime of a program."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .ichiran import ConnParams

log = logging.getLogger(__name__)

_STOP_TIMEOUT = 30.0


def _exe_extension() -> str:
    return "exe" if sys.platform == "win32" else ""


def pg_bin_path(pg_bin_dir: str | os.PathLike, name: str | os.PathLike) -> Path:
    """Path of a PostgreSQL program, with the platform's executable extension."""
    extension = _exe_extension()
    filename = Path(name).with_suffix(f".{extension}" if extension else "")
    return Path(pg_bin_dir) / filename


class PostgresDaemon:
    """A postgres server started on construction and stopped with pg_ctl.

    A failure to start is logged and kept in ``error``; stopping is then a
    no-op.
    """

    def __init__(
        self,
        pg_bin_dir: str | os.PathLike,
        data_path: str | os.PathLike,
        conn_params: ConnParams,
        silent: bool = False,
    ) -> None:
        self.pg_bin_dir = Path(pg_bin_dir)
        self.data_path = Path(data_path)
        self.silent = silent
        self.error: OSError | None = None
        self._proc: subprocess.Popen | None = None

        log.info("starting pg_bin_dir=%s data_path=%s", self.pg_bin_dir, self.data_path)
        args = [
            str(pg_bin_path(self.pg_bin_dir, "postgres")),
            "-p",
            str(conn_params.port),
            "-D",
            str(self.data_path),
        ]
        try:
            self._proc = subprocess.Popen(args, **self._output())
        except OSError as err:
            self.error = err
            log.warning("start failed: %s", err)
        else:
            log.info("started pid=%s", self._proc.pid)

    def _output(self) -> dict[str, Any]:
        if self.silent:
            return {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
        return {}

    @property
    def process(self) -> subprocess.Popen | None:
        """The server process, while it is managed."""
        return self._proc

    @property
    def running(self) -> bool:
        """Whether the server process is alive."""
        return self._proc is not None and self._proc.poll() is None

    def stop(self) -> None:
        """Stop the server with ``pg_ctl stop``; safe to call more than once."""
        proc, self._proc = self._proc, None
        if proc is None:
            return
        status = proc.poll()
        if status is not None:
            log.warning("exited status=%s", status)
            return

        log.info("stopping pid=%s", proc.pid)
        args = [
            str(pg_bin_path(self.pg_bin_dir, "pg_ctl")),
            "--wait",
            "-D",
            str(self.data_path),
            "stop",
        ]
        try:
            ctl = subprocess.Popen(args, **self._output())
        except OSError as err:
            log.warning("stop failed: %s", err)
            proc.kill()
            proc.wait()
            return
        ctl.wait()
        log.info("stopped")
        try:
            proc.wait(timeout=_STOP_TIMEOUT)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()

    def __enter__(self) -> PostgresDaemon:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()