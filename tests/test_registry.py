"""Tests for registry construction, config loading and rule formatting."""

import json
from pathlib import Path

import pytest
import yaml

from zsounds.core.rng import SeededRNG
from zsounds.core.ontology import CarContext
from zsounds.errors import ParseError, ValidationError
from zsounds.rules import (
    ConfigLoader,
    ConfigRegistry,
    RuleEngine,
    describe_rule,
    indent,
    load_config,
    parse_rule,
)
from zsounds.sounds import SoundType


def write_yaml(path: Path, document: dict) -> Path:
    path.write_text(yaml.safe_dump(document), encoding="utf-8")
    return path


class TestConfigRegistry:
    def test_from_document(self, rule_tokens, sound_tokens):
        registry = ConfigRegistry.from_document({"rules": rule_tokens, "sounds": sound_tokens})
        assert registry.get_rule("main") is not None
        assert registry.get_sound("horn1").type is SoundType.HORN_HIT
        assert registry.get_rule("nope") is None

    def test_empty_document(self):
        registry = ConfigRegistry.from_document({})
        assert registry.rules == {}
        assert registry.sounds == {}

    def test_document_must_be_mapping(self):
        with pytest.raises(ParseError):
            ConfigRegistry.from_document(["rules"])

    def test_parse_error_names_entry(self, sound_tokens):
        with pytest.raises(ParseError) as exc_info:
            ConfigRegistry.from_mapping({"main": {"type": "AllOf", "rules": [7]}}, sound_tokens)
        assert exc_info.value.path == "rules.main.rules[0]"

    def test_registry_is_frozen(self, registry):
        with pytest.raises(Exception):
            registry.rules = {}

    def test_describe(self, registry):
        assert registry.describe() == (
            "main:\n"
            "  AllOf:\n"
            "    If CarType = DE6:\n"
            "      OneOf:\n"
            '        1/1: Sound "horn1"'
        )


class TestFormatting:
    def test_indent(self):
        assert indent("a\nb", 2) == "  a\n  b"

    def test_describe_tree(self):
        node = parse_rule({
            "type": "AllOf",
            "rules": [
                {
                    "type": "If",
                    "property": "cartype",
                    "value": "DE6",
                    "rule": {
                        "type": "OneOf",
                        "rules": [{"type": "Sound", "name": "horn1"}, {"type": "Sound", "name": "horn2"}],
                        "weights": [1, 3],
                    },
                },
                "engine",
            ],
        })
        assert describe_rule(node) == (
            "AllOf:\n"
            "  If CarType = DE6:\n"
            "    OneOf:\n"
            '      1/4: Sound "horn1"\n'
            '      3/4: Sound "horn2"\n'
            '  Ref "engine"'
        )

    def test_describe_fractional_weights(self):
        node = parse_rule({"type": "OneOf", "rules": ["a", "b"], "weights": [0.5, 1.5]})
        assert describe_rule(node) == 'OneOf:\n  0.5/2: Ref "a"\n  1.5/2: Ref "b"'

    def test_describe_empty_all_of(self):
        assert describe_rule(parse_rule({"type": "AllOf"})) == "AllOf: (empty)"


class TestConfigLoader:
    def test_load_yaml_file(self, tmp_path, rule_tokens, sound_tokens):
        path = write_yaml(tmp_path / "config.yaml", {"rules": rule_tokens, "sounds": sound_tokens})
        registry = load_config(path)
        assert set(registry.rules) == {"main"}

    def test_load_json_file(self, tmp_path, rule_tokens, sound_tokens):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"rules": rule_tokens, "sounds": sound_tokens}), encoding="utf-8")
        registry = load_config(path)
        assert set(registry.sounds) == {"horn1", "horn2", "bell", "idle"}

    def test_directory_merges_in_name_order(self, tmp_path, sound_tokens):
        write_yaml(tmp_path / "01-base.yaml", {
            "sounds": sound_tokens,
            "rules": {"root": {"type": "AllOf", "sounds": ["horn1"]}},
        })
        (tmp_path / "02-override.json").write_text(json.dumps({
            "sounds": {"horn1": {"type": "HornHit", "filename": "replacement.ogg"}},
        }), encoding="utf-8")
        (tmp_path / "notes.txt").write_text("not a config", encoding="utf-8")

        loader = ConfigLoader(tmp_path)
        files = loader.load_directory()
        assert [f.name for f in files] == ["01-base.yaml", "02-override.json"]

        registry = loader.build_registry()
        assert registry.get_sound("horn1").filenames == ["replacement.ogg"]
        assert set(registry.sounds) == {"horn1", "horn2", "bell", "idle"}

    def test_references_across_files(self, tmp_path, sound_tokens):
        write_yaml(tmp_path / "a.yaml", {"rules": {"root": "shared"}})
        write_yaml(tmp_path / "b.yaml", {"sounds": sound_tokens, "rules": {"shared": {"type": "Sound", "name": "bell"}}})
        registry = load_config(tmp_path)
        assert set(registry.rules) == {"root", "shared"}

    def test_bad_file_aborts_directory(self, tmp_path, sound_tokens):
        write_yaml(tmp_path / "a.yaml", {"sounds": sound_tokens})
        write_yaml(tmp_path / "b.yaml", {"rules": {"root": {"type": "OneOf", "rules": []}}})
        with pytest.raises(ParseError):
            load_config(tmp_path)

    def test_dangling_reference_fails(self, tmp_path):
        write_yaml(tmp_path / "a.yaml", {"rules": {"root": "elsewhere"}})
        with pytest.raises(ValidationError):
            load_config(tmp_path)

    def test_document_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ParseError, match="must be a mapping"):
            ConfigLoader().load_file(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = write_yaml(tmp_path / "bad.yaml", {"rules": ["root"]})
        with pytest.raises(ParseError, match="rules section"):
            ConfigLoader().load_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("rules: {root: [unclosed\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Invalid document"):
            ConfigLoader().load_file(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        loader = ConfigLoader()
        loader.load_file(path)
        assert loader.get_document() == {"sounds": {}, "rules": {}}

    def test_non_string_rule_name(self, tmp_path):
        path = tmp_path / "years.yaml"
        path.write_text("rules:\n  2024:\n    type: AllOf\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Rule names must be strings") as exc_info:
            load_config(path)
        assert exc_info.value.path == "rules.2024"

    def test_boolean_sound_name(self, tmp_path):
        path = tmp_path / "flags.yaml"
        path.write_text("sounds:\n  on:\n    type: Bell\n    filename: b.ogg\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Sound names must be strings, got bool"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load_file(tmp_path / "nope.yaml")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load_directory(tmp_path / "nope")

    def test_no_directory(self):
        with pytest.raises(ValueError):
            ConfigLoader().load_directory()


class TestBundledConfig:
    @pytest.fixture
    def bundled(self, data_dir) -> ConfigRegistry:
        return load_config(data_dir)

    def test_loads(self, bundled):
        assert "root" in bundled.rules
        assert bundled.get_sound("emd_idle").min_pitch == pytest.approx(0.478)

    def test_de6(self, bundled):
        engine = RuleEngine(rng=SeededRNG(seed=3))
        sounds = engine.select("root", bundled, CarContext(car_type="DE6", car_id="1"))
        names = sounds.names()
        assert names["HornHit"] in {"nathan_horn", "leslie_horn"}
        assert names["HornLoop"] == "nathan_horn_loop"
        assert names["EngineLoop"] == "emd_idle"
        assert SoundType.BELL not in sounds

    def test_de2(self, bundled):
        engine = RuleEngine(rng=SeededRNG(seed=3))
        names = engine.select("root", bundled, CarContext(car_type="DE2", car_id="2")).names()
        assert names["Bell"] == "shunter_bell"
        assert names["EngineLoop"] in {"emd_idle", "alco_idle"}
        assert "HornHit" not in names

    def test_other_car(self, bundled):
        engine = RuleEngine(rng=SeededRNG(seed=3))
        assert len(engine.select("root", bundled, CarContext(car_type="LocoSteamHeavy"))) == 0
