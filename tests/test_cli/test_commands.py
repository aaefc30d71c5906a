"""Tests for the keyport CLI commands."""

import json
from pathlib import Path

import pytest

from keyport.cli import app
from keyport.cli.commands.export import load_export_input, parse_registry
from keyport.core.errors import KeymapError
from tests.conftest import key


@pytest.fixture
def layers_file(clean_environment: Path) -> Path:
    path = clean_environment / "layers.json"
    path.write_text(
        json.dumps(
            {
                "deviceName": "Corne",
                "layers": [
                    {
                        "id": 0,
                        "label": "Base",
                        "bindings": [
                            {"behaviorId": 1, "param1": key(0x04)},
                            {"behaviorId": 3, "param1": 1, "param2": key(0x2B)},
                        ],
                    },
                    {"id": 1, "label": "Lower", "bindings": [{"behaviorId": 0}]},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def keymap_file(clean_environment: Path, sample_keymap_source: str) -> Path:
    path = clean_environment / "corne.keymap"
    path.write_text(sample_keymap_source, encoding="utf-8")
    return path


class TestExportInput:
    def test_layer_list(self):
        device, layers, registry = load_export_input(
            [{"id": 0, "label": "Base", "bindings": [{"behaviorId": 0}, {"behaviorId": 0}]}]
        )
        assert device is None
        assert registry == {}
        assert [b.position for b in layers[0].bindings] == [0, 1]

    def test_document_with_registry(self):
        device, layers, registry = load_export_input(
            {
                "deviceName": "Corne",
                "layers": [{"label": "Base"}],
                "behaviors": {"7": "Key Press"},
            }
        )
        assert device == "Corne"
        assert layers[0].id == 0
        assert registry[7].display_name == "Key Press"

    @pytest.mark.parametrize("data", [{"nope": []}, "text", [{"id": "zero"}], [1]])
    def test_invalid_input(self, data):
        with pytest.raises(KeymapError):
            load_export_input(data)

    def test_registry_list(self):
        registry = parse_registry([{"id": 3, "displayName": "Mod-Tap"}])
        assert registry[3].display_name == "Mod-Tap"

    def test_invalid_registry(self):
        with pytest.raises(KeymapError):
            parse_registry([{"id": "x"}])


class TestExportCommand:
    def test_export(self, cli_runner, layers_file, clean_environment):
        out_dir = clean_environment / "out"
        result = cli_runner.invoke(app, ["export", str(layers_file), "-o", str(out_dir)])

        assert result.exit_code == 0, result.output
        files = list(out_dir.glob("corne-*.keymap"))
        assert len(files) == 1
        content = files[0].read_text(encoding="utf-8")
        assert "&kp A &lt 1 TAB" in content
        assert "Keymap exported successfully" in result.output

    def test_device_option_overrides_file(self, cli_runner, layers_file, clean_environment):
        result = cli_runner.invoke(
            app, ["export", str(layers_file), "--device", "My Board", "-o", "."]
        )

        assert result.exit_code == 0, result.output
        assert list(clean_environment.glob("my-board-*.keymap"))

    def test_missing_device_name(self, cli_runner, clean_environment):
        path = clean_environment / "layers.json"
        path.write_text(json.dumps([{"id": 0, "label": "Base"}]), encoding="utf-8")

        result = cli_runner.invoke(app, ["export", str(path)])

        assert result.exit_code == 1
        assert "No keyboard connected" in result.output

    def test_missing_file(self, cli_runner, clean_environment):
        result = cli_runner.invoke(app, ["export", "nope.json"])
        assert result.exit_code == 1

    def test_config_file_settings(self, cli_runner, layers_file, clean_environment):
        (clean_environment / "keyport.yaml").write_text(
            "export:\n  tool_name: Keyport Test\n  output_dir: exported\n",
            encoding="utf-8",
        )

        result = cli_runner.invoke(app, ["export", str(layers_file)])

        assert result.exit_code == 0, result.output
        (exported,) = (clean_environment / "exported").glob("*.keymap")
        assert " * Exported from Keyport Test" in exported.read_text(encoding="utf-8")


class TestImportCommand:
    def test_import_to_file(self, cli_runner, keymap_file, clean_environment):
        output = clean_environment / "layers.json"
        result = cli_runner.invoke(app, ["import", str(keymap_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["deviceName"] == "Corne"
        assert [layer["label"] for layer in payload["layers"]] == ["Base", "Lower"]
        assert payload["layers"][0]["bindings"][0] == {
            "behaviorId": 1,
            "param1": key(0x14),
            "param2": None,
            "position": 0,
        }
        assert len(payload["warnings"]) == 2

    def test_import_to_stdout(self, cli_runner, clean_environment):
        path = clean_environment / "plain.keymap"
        path.write_text(
            "/ { keymap { base { bindings = <&kp A &mo 1>; }; }; };", encoding="utf-8"
        )

        result = cli_runner.invoke(app, ["import", str(path)])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["layers"][0]["label"] == "base"
        assert len(payload["layers"][0]["bindings"]) == 2

    def test_exported_file_imports_back(self, cli_runner, layers_file, clean_environment):
        assert cli_runner.invoke(app, ["export", str(layers_file), "-o", "."]).exit_code == 0
        (keymap,) = clean_environment.glob("corne-*.keymap")
        output = clean_environment / "again.json"

        result = cli_runner.invoke(app, ["import", str(keymap), "-o", str(output)])

        assert result.exit_code == 0, result.output
        original = json.loads(layers_file.read_text(encoding="utf-8"))
        imported = json.loads(output.read_text(encoding="utf-8"))
        assert [layer["label"] for layer in imported["layers"]] == ["Base", "Lower"]
        assert [
            (b["behaviorId"], b.get("param1"), b.get("param2"))
            for b in imported["layers"][0]["bindings"]
        ] == [
            (b["behaviorId"], b.get("param1"), b.get("param2"))
            for b in original["layers"][0]["bindings"]
        ]

    def test_parse_failure(self, cli_runner, clean_environment):
        path = clean_environment / "empty.keymap"
        path.write_text("", encoding="utf-8")

        result = cli_runner.invoke(app, ["import", str(path)])

        assert result.exit_code == 1
        assert "PARSE_ERROR" in result.output

    def test_validation_failure(self, cli_runner, clean_environment):
        path = clean_environment / "nolayers.keymap"
        path.write_text('/ { keymap { compatible = "zmk,keymap"; }; };', encoding="utf-8")

        result = cli_runner.invoke(app, ["import", str(path)])
        assert result.exit_code == 1
        assert "No layers found in keymap" in result.output

        result = cli_runner.invoke(app, ["import", str(path), "--no-validate"])
        assert result.exit_code == 0


class TestInspectCommand:
    def test_inspect(self, cli_runner, keymap_file):
        result = cli_runner.invoke(app, ["inspect", str(keymap_file), "--bindings"])

        assert result.exit_code == 0, result.output
        assert "Corne" in result.output
        assert "Base" in result.output
        assert "&kp LG(Z)" in result.output

    def test_inspect_missing_structure(self, cli_runner, clean_environment):
        path = clean_environment / "bad.keymap"
        path.write_text("nothing here", encoding="utf-8")

        result = cli_runner.invoke(app, ["inspect", str(path)])

        assert result.exit_code == 1
        assert "MISSING_KEYMAP" in result.output


class TestAppOptions:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Keyport v" in result.output

    def test_missing_config_file(self, cli_runner, layers_file):
        result = cli_runner.invoke(app, ["-c", "missing.yaml", "export", str(layers_file)])
        assert result.exit_code != 0
