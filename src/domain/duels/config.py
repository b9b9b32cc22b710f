"""Load duel engine settings from TOML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_metadata

DEFAULT_SYSTEM_NAME = "duel_default"


@dataclass(frozen=True)
class DuelParameters:
    candidate_pool_size: int = 6
    honors_reward: int = 1
    overall_reward: float = 0.1


@dataclass(frozen=True)
class DuelSystemConfig(BaseSystemConfig):
    """Configuration for one duel engine setup."""

    parameters: DuelParameters = field(default_factory=DuelParameters)

    def as_config_json(self) -> dict[str, Any]:
        return {
            "candidate_pool_size": self.parameters.candidate_pool_size,
            "honors_reward": self.parameters.honors_reward,
            "overall_reward": self.parameters.overall_reward,
        }


def load_duel_system_configs(config_dir: Path) -> list[DuelSystemConfig]:
    """Load and validate all duel TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_duel_system_config,
        duplicate_name_label="duel",
    )


def select_duel_system_config(
    configs: list[DuelSystemConfig],
    name: str = DEFAULT_SYSTEM_NAME,
) -> DuelSystemConfig:
    for config in configs:
        if config.name == name:
            return config
    available = ", ".join(sorted(config.name for config in configs))
    raise ValueError(f"Unknown duel system '{name}'. Choose one of: {available}.")


def _parse_duel_system_config(raw: dict[str, Any], file_path: Path) -> DuelSystemConfig:
    name, description = parse_system_metadata(raw, file_path)
    duel_raw = raw.get("duel", {})
    defaults = DuelParameters()

    parameters = DuelParameters(
        candidate_pool_size=int(duel_raw.get("candidate_pool_size", defaults.candidate_pool_size)),
        honors_reward=int(duel_raw.get("honors_reward", defaults.honors_reward)),
        overall_reward=float(duel_raw.get("overall_reward", defaults.overall_reward)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return DuelSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: DuelParameters) -> None:
    if parameters.candidate_pool_size < 1:
        raise ValueError(f"{file_path}: [duel].candidate_pool_size must be >= 1")
    if parameters.honors_reward < 0:
        raise ValueError(f"{file_path}: [duel].honors_reward must be >= 0")
    if parameters.overall_reward < 0.0:
        raise ValueError(f"{file_path}: [duel].overall_reward must be >= 0")
