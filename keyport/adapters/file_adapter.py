"""File adapters for reading keymap sources and writing export artifacts."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from keyport.core.errors import FileSystemError, create_file_error
from keyport.protocols import (
    ArtifactSinkProtocol,
    FileAdapterProtocol,
    TextSourceProtocol,
)


logger = logging.getLogger(__name__)


class FileSystemAdapter:
    """File system adapter implementation."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        try:
            logger.debug("Reading text file: %s", path)
            with path.open(mode="r", encoding=encoding) as f:
                content = f.read()
            logger.debug("Successfully read %d characters from %s", len(content), path)
            return content
        except FileNotFoundError as e:
            error = create_file_error(path, "read_text", e, {"encoding": encoding})
            logger.error("File not found: %s", path)
            raise error from e
        except UnicodeDecodeError as e:
            error = create_file_error(path, "read_text", e, {"encoding": encoding})
            logger.error("Encoding error reading file %s: %s", path, e)
            raise error from e
        except OSError as e:
            error = create_file_error(path, "read_text", e, {"encoding": encoding})
            logger.error("Error reading file %s: %s", path, e)
            raise error from e

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        self.mkdir(path.parent)
        try:
            logger.debug("Writing text file: %s", path)
            with path.open(mode="w", encoding=encoding) as f:
                f.write(content)
            logger.debug("Successfully wrote %d characters to %s", len(content), path)
        except OSError as e:
            error = create_file_error(
                path,
                "write_text",
                e,
                {"encoding": encoding, "content_length": len(content)},
            )
            logger.error("Error writing file %s: %s", path, e)
            raise error from e

    def read_json(self, path: Path, encoding: str = "utf-8") -> Any:
        """Read and parse JSON content from a file."""
        content = self.read_text(path, encoding)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            error = create_file_error(path, "read_json", e, {"encoding": encoding})
            logger.error("Invalid JSON in file %s: %s", path, e)
            raise error from e

    def write_json(
        self, path: Path, data: Any, encoding: str = "utf-8", indent: int = 2
    ) -> None:
        """Write data as JSON to a file."""
        try:
            content = json.dumps(data, indent=indent, ensure_ascii=False)
        except TypeError as e:
            error = create_file_error(
                path, "write_json", e, {"data_type": type(data).__name__}
            )
            logger.error("Cannot serialize data to JSON for file %s: %s", path, e)
            raise error from e
        self.write_text(path, content + "\n", encoding)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory."""
        try:
            path.mkdir(parents=parents, exist_ok=exist_ok)
        except OSError as e:
            error = create_file_error(
                path, "mkdir", e, {"parents": parents, "exist_ok": exist_ok}
            )
            logger.error("Error creating directory %s: %s", path, e)
            raise error from e


class DirectoryArtifactSink:
    """Write export artifacts into a directory without blocking the loop."""

    def __init__(
        self, directory: Path, file_adapter: FileAdapterProtocol | None = None
    ) -> None:
        self.directory = directory
        self.file_adapter = file_adapter or FileSystemAdapter()
        self.written: list[Path] = []

    async def write(self, filename: str, content: str) -> None:
        path = self.directory / filename
        await asyncio.to_thread(self.file_adapter.write_text, path, content)
        self.written.append(path)
        logger.info("Wrote %s", path)


class FileTextSource:
    """Read keymap source files without blocking the loop."""

    def __init__(self, file_adapter: FileAdapterProtocol | None = None) -> None:
        self.file_adapter = file_adapter or FileSystemAdapter()

    async def read_text(self, source: str) -> str:
        return await asyncio.to_thread(self.file_adapter.read_text, Path(source))


def create_file_adapter() -> FileAdapterProtocol:
    """Create a file adapter with default implementation."""
    return FileSystemAdapter()


def create_artifact_sink(directory: Path | str) -> ArtifactSinkProtocol:
    """Create an artifact sink writing into ``directory``."""
    return DirectoryArtifactSink(Path(directory))


def create_text_source() -> TextSourceProtocol:
    return FileTextSource()


__all__ = [
    "FileSystemAdapter",
    "FileSystemError",
    "DirectoryArtifactSink",
    "FileTextSource",
    "create_file_adapter",
    "create_artifact_sink",
    "create_text_source",
]
