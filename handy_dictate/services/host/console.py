"""
Console host adapter.

Used by the interactive ``repl`` command: notices and inserted text are
written to a stream, and project context comes from the local git checkout.
"""

import asyncio
import logging
import sys
from typing import TextIO

from handy_dictate.core.exceptions import HostError
from handy_dictate.core.models import ToastVariant
from handy_dictate.services.host.base import BaseHost

logger = logging.getLogger(__name__)


class ConsoleHost(BaseHost):
    """Terminal stand-in for a host application.

    Args:
        stream: Where notices and prompt text are written (default stdout).
        cwd: Working directory for git lookups.
    """

    def __init__(self, stream: TextIO | None = None, cwd: str | None = None) -> None:
        self._stream = stream or sys.stdout
        self._cwd = cwd
        self.prompt: list[str] = []

    async def show_toast(
        self,
        message: str,
        variant: ToastVariant = ToastVariant.info,
        title: str | None = None,
    ) -> None:
        prefix = f"[{title}] " if title else ""
        print(f"{prefix}{variant.upper()}: {message}", file=self._stream, flush=True)

    async def append_prompt(self, text: str) -> None:
        self.prompt.append(text)
        print(f">>> {text}", file=self._stream, flush=True)

    async def _git(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            HostError: If git is missing or exits non-zero.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                "git",
                *args,
                cwd=self._cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise HostError(f"git unavailable: {exc}") from exc
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise HostError(f"git {args[0]} failed: {stderr.decode().strip()}")
        return stdout.decode()

    async def current_branch(self) -> str | None:
        branch = (await self._git("rev-parse", "--abbrev-ref", "HEAD")).strip()
        return branch or None

    async def modified_files(self) -> list[str]:
        output = await self._git("status", "--porcelain", "-z")
        # NUL-separated "XY path" records; renames and copies are followed
        # by an extra record holding the source path.
        records = iter(output.split("\0"))
        files: list[str] = []
        for record in records:
            if len(record) <= 3:
                continue
            files.append(record[3:])
            if "R" in record[:2] or "C" in record[:2]:
                next(records, None)
        return files
