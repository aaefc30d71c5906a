"""Protocols for the collaborators of the export and import services."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from keyport.models.keymap import ConvertedBinding


@runtime_checkable
class ArtifactSinkProtocol(Protocol):
    """Receives generated keymap files."""

    async def write(self, filename: str, content: str) -> None:
        """Persist or deliver one artifact.

        Args:
            filename: Suggested file name, e.g. ``corne-2024-01-15.keymap``
            content: Complete file content
        """
        ...


@runtime_checkable
class TextSourceProtocol(Protocol):
    """Supplies keymap source text."""

    async def read_text(self, source: str) -> str:
        """Read the full text behind ``source`` (a path or other locator)."""
        ...


@runtime_checkable
class BindingWriterProtocol(Protocol):
    """Applies imported bindings to a device."""

    async def set_binding(
        self, layer_id: int, position: int, binding: "ConvertedBinding"
    ) -> None:
        """Write one binding.

        Raises:
            DeviceError: If the device rejects the write
        """
        ...
