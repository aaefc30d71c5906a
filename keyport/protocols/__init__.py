"""Protocol definitions for Keyport adapters and interfaces.

These protocols use Python's typing.Protocol system with the
@runtime_checkable decorator to enable both static type checking and runtime
isinstance() checks.
"""

from .behavior_protocols import BehaviorResolverProtocol
from .file_adapter_protocol import FileAdapterProtocol
from .transcode_protocols import (
    ArtifactSinkProtocol,
    BindingWriterProtocol,
    TextSourceProtocol,
)


__all__ = [
    "ArtifactSinkProtocol",
    "BehaviorResolverProtocol",
    "BindingWriterProtocol",
    "FileAdapterProtocol",
    "TextSourceProtocol",
]
