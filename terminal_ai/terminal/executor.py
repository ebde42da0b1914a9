import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from ..logging import get_logger

log = get_logger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024  # 10 MiB


def _truncate(text: str) -> str:
    return text.encode()[:MAX_OUTPUT_BYTES].decode(errors="ignore")


@dataclass
class ExecutionResult:
    stdout: str
    stderr: str
    exit_code: int


class CommandExecutor:
    """Runs shell commands in a tracked working directory. Never raises."""

    def __init__(self, working_directory: Optional[str] = None):
        self.working_directory = working_directory or os.getcwd()

    def execute(self, command: str) -> ExecutionResult:
        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self.working_directory,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except (OSError, ValueError) as e:
            log.warning("command_spawn_failed", command=command, error=str(e))
            return ExecutionResult(stdout="", stderr=str(e), exit_code=1)

        stdout = result.stdout or ""
        stderr = result.stderr or ""

        for stream, output in (("stdout", stdout), ("stderr", stderr)):
            if len(output.encode()) > MAX_OUTPUT_BYTES:
                return ExecutionResult(
                    stdout=_truncate(stdout).strip(),
                    stderr=f"{stream} maxBuffer length exceeded",
                    exit_code=1,
                )

        if result.returncode == 0:
            return ExecutionResult(stdout=stdout.strip(), stderr=stderr.strip(), exit_code=0)

        return ExecutionResult(
            stdout=stdout.strip(),
            stderr=stderr.strip() or f"Command failed: {command}",
            # Signals show up as negative return codes.
            exit_code=result.returncode if result.returncode > 0 else 1,
        )

    def set_working_directory(self, directory: str):
        self.working_directory = directory

    def get_working_directory(self) -> str:
        return self.working_directory
