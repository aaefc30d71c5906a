"""Adapters package for external system interfaces."""

from keyport.protocols import (
    ArtifactSinkProtocol,
    FileAdapterProtocol,
    TextSourceProtocol,
)

from .file_adapter import (
    DirectoryArtifactSink,
    FileSystemAdapter,
    FileTextSource,
    create_artifact_sink,
    create_file_adapter,
    create_text_source,
)


__all__ = [
    "ArtifactSinkProtocol",
    "FileAdapterProtocol",
    "TextSourceProtocol",
    "DirectoryArtifactSink",
    "FileSystemAdapter",
    "FileTextSource",
    "create_artifact_sink",
    "create_file_adapter",
    "create_text_source",
]
