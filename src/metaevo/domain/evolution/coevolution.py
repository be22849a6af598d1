"""Model co-evolution boundary.

Migrating instance models to an evolved metamodel is not supported; the entry
point exists so callers can depend on a stable result shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pathlib import Path


log = getLogger(__name__)

NOT_SUPPORTED_MESSAGE: Final[str] = "Model co-evolution is not supported"


@dataclass(frozen=True, slots=True, kw_only=True)
class CoEvolutionResult:
    success: bool
    message: str
    model_path: str
    output_path: str


def co_evolve_model(model_path: str | Path, output_path: str | Path) -> CoEvolutionResult:
    log.warning("Co-evolution of model %s is not supported", model_path)
    return CoEvolutionResult(
        success=False,
        message=NOT_SUPPORTED_MESSAGE,
        model_path=str(model_path),
        output_path=str(output_path),
    )
