"""Async subprocess execution."""

import asyncio
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

_logging = logging.getLogger(__name__)


@dataclass
class CommandResult:
    command: str
    returncode: int
    stdout: str
    stderr: str


async def run_command_async(argv: list[str], cwd: Path | None = None) -> CommandResult:
    """Run a command and wait for it to exit, capturing stdout and stderr.

    There is no timeout: the call returns only when the process exits.

    Raises:
        OSError: If the process cannot be spawned (e.g. FileNotFoundError when
            the executable is missing). Callers classify it.
    """
    command = shlex.join(argv)
    _logging.debug(f"Running command: {command} (cwd={cwd})")

    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await process.communicate()
    finally:
        transport = getattr(process, "_transport", None)
        if transport:
            transport.close()

    result = CommandResult(
        command=command,
        returncode=process.returncode if process.returncode is not None else 1,
        stdout=stdout.decode(errors="replace").strip(),
        stderr=stderr.decode(errors="replace").strip(),
    )
    if result.stderr:
        _logging.debug(f"stderr: {result.stderr}")
    return result
