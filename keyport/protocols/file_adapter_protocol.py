"""Protocol definition for file system operations."""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FileAdapterProtocol(Protocol):
    """Protocol for file system operations."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file.

        Raises:
            FileSystemError: If the file cannot be read
        """
        ...

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, creating parent directories.

        Raises:
            FileSystemError: If the file cannot be written
        """
        ...

    def read_json(self, path: Path, encoding: str = "utf-8") -> Any:
        """Read and parse JSON content from a file.

        Raises:
            FileSystemError: If the file cannot be read or the JSON is invalid
        """
        ...

    def write_json(
        self, path: Path, data: Any, encoding: str = "utf-8", indent: int = 2
    ) -> None:
        """Serialize data as JSON into a file.

        Raises:
            FileSystemError: If the data cannot be serialized or written
        """
        ...

    def exists(self, path: Path) -> bool: ...

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory.

        Raises:
            FileSystemError: If the directory cannot be created
        """
        ...
