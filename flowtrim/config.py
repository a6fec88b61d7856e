from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

MissingStepsPolicy = Literal["ignore", "warn", "skip"]


class DecompositionConfig(BaseModel):
    """Size limits for specs produced by the decomposer."""

    min_spec_size: int = Field(default=2, ge=1)
    max_spec_size: int = Field(default=8, ge=2)
    cost_boundary: float = 15

    @model_validator(mode="after")
    def _ensure_range(self) -> DecompositionConfig:
        if self.max_spec_size < self.min_spec_size:
            raise ValueError("max_spec_size must not be smaller than min_spec_size")
        return self


class ApplicationConfig(BaseModel):
    """How the applier treats optimizations whose steps were already removed."""

    missing_steps_policy: MissingStepsPolicy = "ignore"


class FlowtrimConfig(BaseModel):
    """Top-level configuration model."""

    decomposition: DecompositionConfig = DecompositionConfig()
    application: ApplicationConfig = ApplicationConfig()
    log_level: str = "WARNING"


def load_config(path: Optional[str] = None) -> FlowtrimConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FLOWTRIM_CONFIG env
            variable or 'flowtrim.yaml' in the current directory.
    """

    config_path = path or os.getenv("FLOWTRIM_CONFIG", "flowtrim.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = FlowtrimConfig(**data)
    else:
        config = FlowtrimConfig()

    env_policy = os.getenv("FLOWTRIM_MISSING_STEPS_POLICY")
    if env_policy:
        config.application = ApplicationConfig(
            missing_steps_policy=env_policy.lower()
        )
    env_level = os.getenv("FLOWTRIM_LOG_LEVEL")
    if env_level:
        config.log_level = env_level.upper()
    return config
