"""Tests for the import service."""

import pytest

from keyport.config.models import ValidationSettings
from keyport.models.keymap import ConvertedBinding, ConvertedLayer
from keyport.services.import_service import (
    ImportErrorCode,
    ImportResult,
    ImportService,
    create_import_service,
)
from tests.conftest import MemoryTextSource, RecordingWriter, key


@pytest.fixture
def service(sample_keymap_source) -> ImportService:
    return create_import_service(MemoryTextSource({"corne.keymap": sample_keymap_source}))


def tuples(layer: ConvertedLayer) -> list[tuple]:
    return [(b.behavior_id, b.param1, b.param2, b.position) for b in layer.bindings]


class TestImportFromString:
    def test_sample_keymap(self, service, sample_keymap_source):
        result = service.import_from_string(sample_keymap_source)

        assert result.success
        assert [(layer.id, layer.label) for layer in result.layers] == [
            (0, "Base"),
            (1, "Lower"),
        ]
        assert tuples(result.layers[0]) == [
            (1, key(0x14), None, 0),
            (2, key(0xE0), key(0x04), 1),
            (3, 1, key(0x2B), 2),
            (4, 1, None, 3),
            (0, None, None, 4),
            (1, key(0x1D, 0x08), None, 5),
        ]
        assert tuples(result.layers[1])[:4] == [
            (6, 1, None, 0),
            (6, 0, None, 1),
            (5, 0, None, 2),
            (1, 0x000C00E9, None, 3),
        ]
        assert result.metadata.device == "Corne"

    def test_unsupported_behaviors_become_transparent(self, service, sample_keymap_source):
        result = service.import_from_string(sample_keymap_source)

        assert tuples(result.layers[1])[4:] == [(0, None, None, 4), (0, None, None, 5)]
        assert result.warnings == [
            "Unsupported behavior: none at position 4 in layer 1",
            "Unsupported behavior: studio_unlock at position 5 in layer 1",
        ]

    def test_unknown_behavior_warned_once(self, service):
        source = "/ { keymap { l { bindings = <&kp A &caps_word &kp B>; }; }; };"
        result = service.import_from_string(source)

        assert result.success
        assert tuples(result.layers[0]) == [
            (1, key(0x04), None, 0),
            (0, None, None, 1),
            (1, key(0x05), None, 2),
        ]
        assert result.warnings == ["Unknown behavior: caps_word in binding: &caps_word"]

    def test_non_decimal_define_is_not_a_layer_constant(self, service):
        source = (
            "#define BASE 0\n#define LOWER \u00b2\n"
            "/ { keymap { l { bindings = <&mo BASE &kp A>; }; }; };"
        )
        result = service.import_from_string(source)

        assert result.success, result.error
        assert tuples(result.layers[0]) == [(4, 0, None, 0), (1, key(0x04), None, 1)]

    def test_parse_failure(self, service):
        result = service.import_from_string("")

        assert not result.success
        assert result.error.code == ImportErrorCode.PARSE_ERROR.value
        assert result.error.message == "Empty file content"
        assert result.layers == []


class TestImportFromFile:
    @pytest.mark.asyncio
    async def test_reads_through_source(self, service):
        result = await service.import_from_file("corne.keymap")

        assert result.success
        assert len(result.layers) == 2

    @pytest.mark.asyncio
    async def test_read_failure(self, service):
        result = await service.import_from_file("missing.keymap")

        assert not result.success
        assert result.error.code == ImportErrorCode.FILE_READ_ERROR.value
        assert "missing.keymap" in result.error.message
        assert result.error.context == {"source": "missing.keymap"}

    @pytest.mark.asyncio
    async def test_without_text_source(self):
        result = await ImportService().import_from_file("x.keymap")
        assert not result.success
        assert result.error.code == "FILE_READ_ERROR"
        assert result.error.message == "No text source configured"
        assert result.error.context == {"source": "x.keymap"}
        assert result.layers == []


class TestValidateImport:
    def test_failed_import(self, service):
        validation = service.validate_import(ImportResult(success=False))
        assert not validation.valid
        assert validation.errors == ["Import failed"]

    def test_no_layers(self, service):
        validation = service.validate_import(ImportResult(success=True))
        assert not validation.valid
        assert validation.errors == ["No layers found in keymap"]

    def test_warnings(self):
        service = ImportService(settings=ValidationSettings(max_bindings_per_layer=2))
        result = ImportResult(
            success=True,
            layers=[
                ConvertedLayer(id=0, label="Empty"),
                ConvertedLayer(
                    id=1,
                    label="Big",
                    bindings=[
                        ConvertedBinding(behavior_id=0, position=0),
                        ConvertedBinding(behavior_id=1, position=1),
                        ConvertedBinding(behavior_id=42, position=2),
                    ],
                ),
            ],
        )
        validation = service.validate_import(result)

        assert validation.valid
        assert validation.errors == []
        assert validation.warnings == [
            "Layer 0 (Empty) has no bindings",
            "Layer 1 (Big) has many bindings (3)",
            "Invalid behavior ID 42 at position 2 in layer 1",
        ]


class TestApplyToDevice:
    @pytest.mark.asyncio
    async def test_writes_every_binding(self, service, sample_keymap_source, recording_writer):
        result = service.import_from_string(sample_keymap_source)
        applied = await service.apply_to_device(result, recording_writer)

        assert applied.success
        assert applied.applied == 12
        assert [(layer_id, position) for layer_id, position, _ in recording_writer.calls][:2] == [
            (0, 0),
            (0, 1),
        ]
        assert recording_writer.calls[-1][:2] == (1, 5)

    @pytest.mark.asyncio
    async def test_stops_at_first_rejected_write(self, service, sample_keymap_source):
        writer = RecordingWriter(fail_at=(0, 2))
        result = service.import_from_string(sample_keymap_source)
        applied = await service.apply_to_device(result, writer)

        assert not applied.success
        assert applied.applied == 2
        assert applied.error.code == ImportErrorCode.RPC_ERROR.value
        assert applied.error.context == {"layer_id": 0, "position": 2}

    @pytest.mark.asyncio
    async def test_failed_import_is_not_applied(self, service, recording_writer):
        applied = await service.apply_to_device(ImportResult(success=False), recording_writer)

        assert not applied.success
        assert applied.error.code == ImportErrorCode.VALIDATION_ERROR.value
        assert recording_writer.calls == []
