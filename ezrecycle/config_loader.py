"""Configuration Loader for the recycling guidance service.

This module provides a type-safe, validated configuration system.
Form vocabularies and oracle settings are externalized to a YAML file;
secrets stay in the environment (see api_keys.py).
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


# =============================================================================
# PYDANTIC MODELS FOR CONFIGURATION VALIDATION
# =============================================================================

class AppMeta(BaseModel):
    """Application metadata shown by the status endpoint."""
    name: str = "EzRecycle"
    description: str = ""
    version: str = "1.0"


class AdvisoryConfig(BaseModel):
    """Settings for the external advisory oracle."""
    model: str = "gemini-2.5-flash-lite"
    temperature: float = 0.4
    max_output_tokens: Optional[int] = None
    json_mode: bool = False
    timeout_s: Optional[float] = None


class LabeledOption(BaseModel):
    """A select option whose stored value differs from its display label."""
    value: str
    label: str = ""


class VocabularyConfig(BaseModel):
    """Fixed enumerations offered by the input wizard."""
    materials: list[str] = Field(default_factory=list)
    plastic_codes: list[LabeledOption] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)

    @property
    def plastic_code_values(self) -> list[str]:
        return [option.value for option in self.plastic_codes]


class WizardMessages(BaseModel):
    """User-facing corrective messages."""
    missing_name: str = "Please provide the item name"
    missing_materials: str = "Please select at least one material"
    submission_failed: str = "Failed to get recycling guidance. Please try again."


class WizardConfig(BaseModel):
    messages: WizardMessages = Field(default_factory=WizardMessages)


class GuidanceConfig(BaseModel):
    """Root configuration object."""
    app: AppMeta = Field(default_factory=AppMeta)
    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig)
    wizard: WizardConfig = Field(default_factory=WizardConfig)


# =============================================================================
# LOADING
# =============================================================================

_PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = _PACKAGE_DIR / "config.yaml"


def _resolve_config_path() -> Path:
    """Resolve config path, honouring the EZRECYCLE_CONFIG override."""
    override = os.getenv("EZRECYCLE_CONFIG")
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Optional[str] = None) -> GuidanceConfig:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, uses EZRECYCLE_CONFIG or
            the packaged config.yaml.

    Returns:
        Validated GuidanceConfig object
    """
    path = Path(config_path) if config_path else _resolve_config_path()

    with open(path, 'r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}

    return GuidanceConfig.model_validate(raw)


_config: Optional[GuidanceConfig] = None


def get_config() -> GuidanceConfig:
    """Get the loaded configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Optional[str] = None) -> GuidanceConfig:
    """Force reload of configuration."""
    global _config

    _config = load_config(config_path)
    return _config


def get_options_summary() -> dict:
    """Vocabularies in the shape the form renders them."""
    vocab = get_config().vocabulary
    return {
        "materials": list(vocab.materials),
        "plastic_codes": [option.model_dump() for option in vocab.plastic_codes],
        "sizes": list(vocab.sizes),
        "conditions": list(vocab.conditions),
    }
