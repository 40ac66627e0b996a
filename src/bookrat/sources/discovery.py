"""Startup scan for candidate document packages."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from bookrat.runtime import telemetry

DEFAULT_EXTENSIONS = (".epub",)


def discover_files(
    directory: str | Path = ".", *, extensions: Iterable[str] = DEFAULT_EXTENSIONS
) -> List[str]:
    """List package files directly inside ``directory``, sorted by name."""

    suffixes = {
        ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
    }
    root = Path(directory)
    try:
        found = sorted(
            entry
            for entry in root.iterdir()
            if entry.is_file() and entry.suffix.lower() in suffixes
        )
    except OSError as exc:
        telemetry.record_event(
            "discovery.failed",
            level="warning",
            data={"directory": str(root), "reason": str(exc)},
        )
        return []
    telemetry.record_event(
        "discovery.done", data={"directory": str(root), "files": len(found)}
    )
    return [str(entry) for entry in found]


def display_name(path: str) -> str:
    """File stem shown in the file list."""

    return Path(path).stem


__all__ = ["DEFAULT_EXTENSIONS", "discover_files", "display_name"]
