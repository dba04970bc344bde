"""Core functionality for spinup."""

from spinup.core.events import EVENT_TYPES, DeploymentEvent, EventDispatcher
from spinup.core.exceptions import (
    CommandFailure,
    InjectionIOError,
    SpawnFailure,
    SpinupError,
    UnknownTarget,
)
from spinup.core.injector import FileInjector
from spinup.core.orchestrator import PipelineOrchestrator
from spinup.core.registry import INJECTION_CONFIGS, lookup, supported_targets
from spinup.core.runner import CommandRunner

__all__ = [
    "EVENT_TYPES",
    "DeploymentEvent",
    "EventDispatcher",
    "CommandFailure",
    "InjectionIOError",
    "SpawnFailure",
    "SpinupError",
    "UnknownTarget",
    "FileInjector",
    "PipelineOrchestrator",
    "INJECTION_CONFIGS",
    "lookup",
    "supported_targets",
    "CommandRunner",
]
