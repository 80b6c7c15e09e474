"""
Named-blob output sink: one UTF-8 text file per benchmark payload.
"""

from __future__ import annotations

from pathlib import Path

from lookup_bench.utils.logging import get_logger

log = get_logger(__name__)


class FileSink:
    """Write payloads as `<directory>/<name>`, replacing any existing file."""

    def __init__(self, directory: Path | str = ".") -> None:
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / name

    def write_named_blob(self, name: str, content: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
            f.write("\n")
        log.info("Payload written", extra={"path": str(path), "chars": len(content)})
        return path

    def discard(self, name: str) -> bool:
        """Remove a previously written blob; returns whether one existed."""
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        log.info("Stale payload removed", extra={"path": str(path)})
        return True


__all__ = ["FileSink"]
