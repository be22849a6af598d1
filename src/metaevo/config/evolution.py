"""Evolution pipeline switches."""

from __future__ import annotations

import os
from dataclasses import dataclass

from metaevo.domain.model import DEFAULT_ATTRIBUTE_TYPE, is_known_data_type

from .env import env_flag
from .errors import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class EvolutionConfig:
    revalidate_on_apply: bool = False
    default_attribute_type: str = DEFAULT_ATTRIBUTE_TYPE


def get_evolution_config() -> EvolutionConfig:
    default_type = os.getenv("METAEVO_DEFAULT_ATTRIBUTE_TYPE", "").strip() or DEFAULT_ATTRIBUTE_TYPE
    if not is_known_data_type(default_type):
        raise InvalidConfigurationError(
            "METAEVO_DEFAULT_ATTRIBUTE_TYPE", default_type, "an Ecore data type name"
        )
    return EvolutionConfig(
        revalidate_on_apply=env_flag("METAEVO_REVALIDATE_ON_APPLY"),
        default_attribute_type=default_type,
    )
