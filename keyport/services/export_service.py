"""Export service: turn device layers into a ZMK keymap artifact."""

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from enum import Enum

from keyport.config.models import ExportSettings
from keyport.core.structlog_logger import StructlogMixin
from keyport.keymap.generator import KeymapGenerator, export_filename
from keyport.models.keymap import BehaviorRegistry, Keymap, Layer
from keyport.models.results import BaseResult
from keyport.protocols import ArtifactSinkProtocol


class ExportErrorCode(str, Enum):
    """Failure codes of an export."""

    NO_KEYBOARD = "NO_KEYBOARD"
    RPC_FAILURE = "RPC_FAILURE"
    UNKNOWN_BEHAVIOR = "UNKNOWN_BEHAVIOR"
    INVALID_LAYER = "INVALID_LAYER"
    GENERATION_FAILED = "GENERATION_FAILED"


class ExportResult(BaseResult):
    """Outcome of an export: the artifact name and content, or an error."""

    filename: str = ""
    content: str | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExportService(StructlogMixin):
    """Validate device layers, render them and hand the file to a sink."""

    service_name = "ExportService"

    def __init__(
        self,
        artifact_sink: ArtifactSinkProtocol,
        settings: ExportSettings | None = None,
        generator: KeymapGenerator | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the export service.

        Args:
            artifact_sink: Receives the generated file
            settings: Export options; defaults apply when omitted
            generator: Keymap generator; built from ``settings`` when omitted
            clock: Source of the export timestamp
        """
        super().__init__()
        self.artifact_sink = artifact_sink
        self.settings = settings or ExportSettings()
        self.generator = generator or KeymapGenerator(
            tool_name=self.settings.tool_name,
            bindings_per_row=self.settings.bindings_per_row,
            include_footer=self.settings.include_footer,
        )
        self.clock = clock

    async def export_keymap(
        self,
        device_name: str,
        layers: Sequence[Layer],
        registry: BehaviorRegistry | None = None,
    ) -> ExportResult:
        """Export layers to a ``.keymap`` file.

        Args:
            device_name: Name of the connected keyboard
            layers: Layers read from the device
            registry: Optional behavior registry reported by the device

        Returns:
            ExportResult; never raises
        """
        result = ExportResult(success=False)

        if not device_name or not device_name.strip():
            result.fail(
                ExportErrorCode.NO_KEYBOARD.value, "Device name is required for export"
            )
            return result

        if not layers:
            result.fail(
                ExportErrorCode.INVALID_LAYER.value, "No layers available to export"
            )
            return result

        self.logger.info(
            "export_started",
            device=device_name,
            layers=len(layers),
            has_registry=bool(registry),
        )

        try:
            keymap = Keymap(
                layers=list(layers),
                device_name=device_name,
                layout_name=self.settings.layout_name,
                timestamp=self.clock(),
                version=self.settings.version,
            )
            warnings: list[str] = []
            content = self.generator.generate(keymap, registry, warnings)
            filename = export_filename(device_name, keymap.timestamp.date())

            await self.artifact_sink.write(filename, content)
        except Exception as e:
            self.log_error_with_context("export_failed", e, device=device_name)
            result.fail(
                ExportErrorCode.GENERATION_FAILED.value,
                str(e) or "Unknown error",
                {"error_type": e.__class__.__name__},
            )
            return result

        result.success = True
        result.filename = filename
        result.content = content
        for warning in warnings:
            result.add_warning(warning)

        self.logger.info(
            "export_completed",
            filename=filename,
            bindings=keymap.total_bindings,
            warnings=len(warnings),
        )
        return result


def create_export_service(
    artifact_sink: ArtifactSinkProtocol,
    settings: ExportSettings | None = None,
) -> ExportService:
    """Create an ExportService with a generator configured from ``settings``."""
    return ExportService(artifact_sink=artifact_sink, settings=settings)
