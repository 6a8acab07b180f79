from __future__ import annotations

import asyncio
import shutil
from typing import Optional, Sequence

CLIPBOARD_COMMANDS: Sequence[Sequence[str]] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("pbcopy",),
    ("clip.exe",),
)


def find_clipboard_command() -> Optional[Sequence[str]]:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


class CommandClipboard:
    def __init__(self, command: Sequence[str]) -> None:
        self._command = list(command)

    async def __call__(self, text: str) -> None:
        process = await asyncio.create_subprocess_exec(
            *self._command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        await process.communicate(text.encode("utf-8"))
        if process.returncode:
            raise RuntimeError(f"{self._command[0]} exited with status {process.returncode}")


def system_clipboard() -> Optional[CommandClipboard]:
    command = find_clipboard_command()
    return CommandClipboard(command) if command else None


__all__ = ["CommandClipboard", "find_clipboard_command", "system_clipboard"]
