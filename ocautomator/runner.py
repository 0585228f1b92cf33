"""Run the installer script and forward its output to the log."""
import logging
import shlex
import subprocess
import threading
from typing import IO, List, Optional, Sequence

from ocautomator.registry import ClusterRecord

logger = logging.getLogger(__name__)

ACTIONS = ("create", "delete")


class ExecError(RuntimeError):
    """The installer script could not be started or exited non-zero."""

    def __init__(self, message: str, cmd: Sequence[str], returncode: Optional[int] = None):
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode


def build_install_args(action: str, record: ClusterRecord) -> List[str]:
    """Positional flags understood by run-openshift-install.sh."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown installer action '{action}'. Expected one of: {', '.join(ACTIONS)}")
    return [
        "-s", record.directory,
        "-a", action,
        "-n", record.name,
        "-p", record.platform,
    ]


def format_command(script_path: str, args: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in [script_path, *args])


def _forward(stream: IO[str], tag: str, label: str) -> None:
    with stream:
        for line in stream:
            logger.info(f"{label} {tag}: {line.rstrip()}")


def run_script(script_path: str, args: Sequence[str], label: str = "Install Script") -> None:
    """
    Run ``script_path`` with ``args`` and block until it exits.

    Every line written to stdout or stderr is logged as it arrives, tagged
    StdOut or StdErr. Order is kept within a stream, not across the two.

    Raises:
        ExecError: if the script cannot be started or exits non-zero
    """
    cmd = [str(script_path), *[str(a) for a in args]]
    cmd_str = format_command(script_path, args)
    logger.debug(f"💻 Running: {cmd_str}")

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,  # Line buffered
        )
    except OSError as e:
        raise ExecError(f"failed to start command: {e}", cmd) from e

    readers = [
        threading.Thread(target=_forward, args=(process.stdout, "StdOut", label), daemon=True),
        threading.Thread(target=_forward, args=(process.stderr, "StdErr", label), daemon=True),
    ]
    for reader in readers:
        reader.start()

    # Both streams must hit EOF before the exit status counts as final
    for reader in readers:
        reader.join()
    returncode = process.wait()

    if returncode != 0:
        raise ExecError(
            f"Command failed: {cmd_str} (exit code: {returncode})",
            cmd,
            returncode=returncode,
        )
    logger.debug(f"🟢 Completed: {cmd_str}")
