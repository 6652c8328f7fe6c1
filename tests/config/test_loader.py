"""Tests for tenure_config -- YAML loading, validation and checksums."""

import pytest
import yaml

from tenure_config.loader import (
    DATABASE_URL_ENV,
    compute_checksum,
    load_config,
    parse_config,
)
from tenure_config.schema import EligibilityConfig, ScheduleConfig, TenureEngineConfig
from tenure_engines.catalog import resolve_tenure_catalog
from tenure_engines.domain import ConceptCatalogEntry, SupplementTier


class TestLoadConfig:

    def test_packaged_defaults_match_schema_defaults(self, monkeypatch):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        config = load_config()
        assert config == TenureEngineConfig()
        assert config.eligibility.guild_tokens == ("luz", "fuerza")
        assert config.catalog.tier_fragments[SupplementTier.FEMALE_22_PLUS] == ("mas de 22",)
        assert config.schedule.checkpoint_key == "antiguedadLastUpdate"

    def test_partial_file_keeps_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        path = tmp_path / "tenure.yaml"
        path.write_text("schedule:\n  tick_interval_seconds: 600\n", encoding="utf-8")
        config = load_config(path)
        assert config.schedule.tick_interval_seconds == 600
        assert config.eligibility == EligibilityConfig()

    def test_environment_overrides_database_url(self, monkeypatch):
        monkeypatch.setenv(DATABASE_URL_ENV, "sqlite:///override.db")
        assert load_config().storage.database_url == "sqlite:///override.db"

    def test_load_is_logged_with_checksum(self, monkeypatch, captured_logs):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        config = load_config()
        entry = next(r for r in captured_logs() if r["message"] == "config_loaded")
        assert entry["checksum"] == compute_checksum(config)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("eligibility: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_config(path)


class TestParseConfig:

    def test_empty_mapping_is_defaults(self):
        assert parse_config(None) == TenureEngineConfig()
        assert parse_config({}) == TenureEngineConfig()

    def test_custom_catalog(self):
        config = parse_config({
            "catalog": {
                "fixed_bonus_patterns": ["antiguedad fija"],
                "tier_fragments": {
                    "10-24": ["a"], "25+": ["b"], "10-21": ["c"], "22+": ["d"],
                },
            },
        })
        assert config.catalog.fixed_bonus_patterns == ("antiguedad fija",)
        assert config.catalog.tier_fragments[SupplementTier.MALE_25_PLUS] == ("b",)

    def test_catalog_patterns_written_with_accents_still_match(self):
        config = parse_config({
            "catalog": {
                "fixed_bonus_patterns": ["Bonif Antigüedad"],
                "supplement_patterns": ["Suplemento Antigüedad"],
                "tier_fragments": {
                    "10-24": ["Entre 10", "24"],
                    "25+": ["Más de 25"],
                    "10-21": ["Entre 10", "21"],
                    "22+": ["Más de 22"],
                },
            },
        })
        catalog = resolve_tenure_catalog(
            [
                ConceptCatalogEntry(1, "Bonif Antigüedad"),
                ConceptCatalogEntry(2, "Suplemento Antigüedad entre 10 y 24"),
                ConceptCatalogEntry(3, "Suplemento Antigüedad Más de 25"),
            ],
            config.catalog,
        )
        assert catalog.fixed_bonus_id == 1
        assert catalog.supplement_ids == frozenset({2, 3})
        assert catalog.supplement_id_for(SupplementTier.MALE_25_PLUS) == 3

    @pytest.mark.parametrize(
        "data",
        [
            {"unknown": {}},
            {"eligibility": {"guild": ["luz"]}},
            {"eligibility": {"guild_tokens": "luz"}},
            {"eligibility": {"guild_tokens": []}},
            {"schedule": {"tick_interval_seconds": 0}},
            {"schedule": []},
            {"storage": {"database_url": " "}},
            {"catalog": {"tier_fragments": {"10-24": ["a"]}}},
            {"catalog": {"tier_fragments": {"7-9": ["a"]}}},
        ],
    )
    def test_invalid_configuration_rejected(self, data):
        with pytest.raises(ValueError):
            parse_config(data)


class TestChecksum:

    def test_deterministic(self):
        assert compute_checksum(TenureEngineConfig()) == compute_checksum(parse_config({}))

    def test_changes_with_content(self):
        other = TenureEngineConfig(schedule=ScheduleConfig(tick_interval_seconds=1))
        assert compute_checksum(other) != compute_checksum(TenureEngineConfig())
