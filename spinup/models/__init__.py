"""Data models for spinup."""

from spinup.models.injection import InjectionConfig, InjectionFile
from spinup.models.pipeline import (
    CommandOverrides,
    DeploymentResult,
    PipelineContext,
    Step,
)

__all__ = [
    # Injection
    "InjectionConfig",
    "InjectionFile",
    # Pipeline
    "CommandOverrides",
    "DeploymentResult",
    "PipelineContext",
    "Step",
]
