"""
Configuration schema (``tenure_config.schema``).

Frozen dataclasses describing every tunable of the tenure reconciliation
engine.  Field defaults are the production values; the packaged
``defaults.yaml`` restates them so operators can see and override them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tenure_engines.catalog import CatalogMatching
from tenure_engines.normalize import normalize_text


@dataclass(frozen=True)
class EligibilityConfig:
    """Which employees and which assignments the engine owns."""

    guild_tokens: tuple[str, ...] = ("luz", "fuerza")
    owned_concept_type: str = "CONCEPTO_LYF"

    def __post_init__(self):
        if not self.guild_tokens:
            raise ValueError("guild_tokens must not be empty")
        if any(not normalize_text(t) for t in self.guild_tokens):
            raise ValueError("guild_tokens must not contain blank tokens")
        if not self.owned_concept_type.strip():
            raise ValueError("owned_concept_type must not be blank")


@dataclass(frozen=True)
class ScheduleConfig:
    """Recurring trigger and checkpoint settings."""

    tick_interval_seconds: int = 3600
    checkpoint_key: str = "antiguedadLastUpdate"

    def __post_init__(self):
        if self.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be positive")
        if not self.checkpoint_key.strip():
            raise ValueError("checkpoint_key must not be blank")


@dataclass(frozen=True)
class StorageConfig:
    """Where the checkpoint is persisted."""

    database_url: str = "sqlite:///tenure_checkpoints.db"

    def __post_init__(self):
        if not self.database_url.strip():
            raise ValueError("database_url must not be blank")


@dataclass(frozen=True)
class TenureEngineConfig:
    """Complete configuration of the tenure reconciliation engine."""

    eligibility: EligibilityConfig = field(default_factory=EligibilityConfig)
    catalog: CatalogMatching = field(default_factory=CatalogMatching)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
