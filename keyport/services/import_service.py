"""Import service: turn ZMK keymap source into device-ready layers."""

from collections.abc import Mapping
from enum import Enum

from pydantic import Field

from keyport.codec.behavior import STATIC_BEHAVIORS, BehaviorKind
from keyport.codec.reverse import binding_from_parsed, usage_from_key_expression
from keyport.config.models import ValidationSettings
from keyport.core.structlog_logger import StructlogMixin
from keyport.keymap.parser import DeviceTreeParser, parse_binding
from keyport.models.base import KeyportBaseModel
from keyport.models.keymap import (
    ConvertedBinding,
    ConvertedLayer,
    KeymapMetadata,
    ParsedLayer,
)
from keyport.models.results import BaseResult
from keyport.protocols import BindingWriterProtocol, TextSourceProtocol


class ImportErrorCode(str, Enum):
    """Failure codes of an import."""

    FILE_READ_ERROR = "FILE_READ_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RPC_ERROR = "RPC_ERROR"


class ImportResult(BaseResult):
    """Layers decoded from a keymap file."""

    layers: list[ConvertedLayer] = Field(default_factory=list)
    metadata: KeymapMetadata | None = None


class ValidationResult(KeyportBaseModel):
    valid: bool
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ApplyResult(BaseResult):
    """Outcome of writing imported bindings to a device."""

    applied: int = 0


class ImportService(StructlogMixin):
    """Parse keymap source and convert it back to numeric bindings."""

    service_name = "ImportService"

    def __init__(
        self,
        text_source: TextSourceProtocol | None = None,
        parser: DeviceTreeParser | None = None,
        settings: ValidationSettings | None = None,
    ) -> None:
        super().__init__()
        self.text_source = text_source
        self.parser = parser or DeviceTreeParser()
        self.settings = settings or ValidationSettings()

    def import_from_string(self, content: str) -> ImportResult:
        """Import keymap source text.

        Unknown behaviors are kept as transparent placeholders so every
        position of a layer survives. Layer ids are assigned in source order.

        Returns:
            ImportResult; never raises
        """
        result = ImportResult(success=False)
        try:
            parsed = self.parser.parse(content)
            if not parsed.success:
                error = parsed.error
                result.fail(
                    ImportErrorCode.PARSE_ERROR.value,
                    error.message if error else "Failed to parse keymap",
                    error.to_dict() if error else None,
                )
                return result

            for warning in parsed.warnings:
                result.add_warning(warning)

            layer_constants = parsed.layer_constants
            result.layers = [
                self._convert_layer(index, layer, layer_constants, result)
                for index, layer in enumerate(parsed.layers)
            ]
            result.metadata = parsed.metadata
            result.success = True
        except Exception as e:
            self.log_error_with_context("import_conversion_failed", e)
            result.fail(ImportErrorCode.PARSE_ERROR.value, str(e) or "Unknown error")
            return result

        self.logger.info(
            "import_completed", layers=len(result.layers), warnings=len(result.warnings)
        )
        return result

    def _convert_layer(
        self,
        index: int,
        layer: ParsedLayer,
        layer_constants: Mapping[str, int],
        result: ImportResult,
    ) -> ConvertedLayer:
        bindings: list[ConvertedBinding] = []
        for position, text in enumerate(layer.bindings):
            parsed = parse_binding(text)
            converted = binding_from_parsed(
                parsed, usage_from_key_expression, layer_constants
            )
            if converted is None:
                kind = BehaviorKind.from_tag(parsed.behavior_tag)
                if kind is not BehaviorKind.UNKNOWN:
                    result.add_warning(
                        f"Unsupported behavior: {parsed.behavior_tag} "
                        f"at position {position} in layer {index}"
                    )
                bindings.append(ConvertedBinding(behavior_id=0, position=position))
            else:
                bindings.append(converted.at(position))

        return ConvertedLayer(id=index, label=layer.label, bindings=bindings)

    async def import_from_file(self, source: str) -> ImportResult:
        """Read ``source`` through the text source and import it."""
        if self.text_source is None:
            self.logger.warning("import_no_text_source", source=source)
            result = ImportResult(success=False)
            result.fail(
                ImportErrorCode.FILE_READ_ERROR.value,
                "No text source configured",
                {"source": source},
            )
            return result

        try:
            content = await self.text_source.read_text(source)
        except Exception as e:
            self.log_error_with_context("import_read_failed", e, source=source)
            result = ImportResult(success=False)
            result.fail(
                ImportErrorCode.FILE_READ_ERROR.value,
                str(e) or "Failed to read file",
                {"source": source},
            )
            return result

        return self.import_from_string(content)

    def validate_import(self, result: ImportResult) -> ValidationResult:
        """Check an import for problems worth showing before applying it."""
        if not result.success:
            return ValidationResult(valid=False, errors=["Import failed"])

        if not result.layers:
            return ValidationResult(valid=False, errors=["No layers found in keymap"])

        warnings: list[str] = []
        limit = self.settings.max_bindings_per_layer
        for index, layer in enumerate(result.layers):
            count = len(layer.bindings)
            if count == 0:
                warnings.append(f"Layer {index} ({layer.label}) has no bindings")
            if count > limit:
                warnings.append(
                    f"Layer {index} ({layer.label}) has many bindings ({count})"
                )

            for binding in layer.bindings:
                if binding.behavior_id not in STATIC_BEHAVIORS:
                    warnings.append(
                        f"Invalid behavior ID {binding.behavior_id} "
                        f"at position {binding.position} in layer {index}"
                    )

        return ValidationResult(valid=True, warnings=warnings)

    async def apply_to_device(
        self, result: ImportResult, writer: BindingWriterProtocol
    ) -> ApplyResult:
        """Write every imported binding through ``writer``.

        Stops at the first rejected write.
        """
        applied = ApplyResult(success=False)
        if not result.success:
            applied.fail(
                ImportErrorCode.VALIDATION_ERROR.value, "Cannot apply a failed import"
            )
            return applied

        for layer in result.layers:
            for binding in layer.bindings:
                try:
                    await writer.set_binding(layer.id, binding.position, binding)
                except Exception as e:
                    self.log_error_with_context(
                        "binding_write_failed",
                        e,
                        layer_id=layer.id,
                        position=binding.position,
                    )
                    applied.fail(
                        ImportErrorCode.RPC_ERROR.value,
                        str(e) or "Failed to write binding",
                        {"layer_id": layer.id, "position": binding.position},
                    )
                    return applied
                applied.applied += 1

        applied.success = True
        self.logger.info("import_applied", bindings=applied.applied)
        return applied


def create_import_service(
    text_source: TextSourceProtocol | None = None,
    settings: ValidationSettings | None = None,
) -> ImportService:
    """Create an ImportService with the default parser."""
    return ImportService(text_source=text_source, settings=settings)
