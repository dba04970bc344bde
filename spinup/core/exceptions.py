"""Custom exceptions for spinup."""

from collections.abc import Sequence
from typing import Any


class SpinupError(Exception):
    """Base exception for spinup."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SpawnFailure(SpinupError):
    """An external tool could not be launched at all."""

    def __init__(self, command: str, cause: OSError):
        super().__init__(
            f"Failed to launch '{command}': {cause.strerror or cause}",
            {"command": command, "errno": cause.errno},
        )
        self.command = command
        self.cause = cause


class CommandFailure(SpinupError):
    """An external tool ran and exited with a non-zero status."""

    def __init__(self, command: str, args: Sequence[str], exit_code: int):
        super().__init__(
            f"{command} exited with {exit_code}",
            {"command": command, "args": list(args), "exit_code": exit_code},
        )
        self.command = command
        self.args_list = list(args)
        self.exit_code = exit_code


class UnknownTarget(SpinupError):
    """No injection configuration exists for a framework/platform pair."""

    def __init__(self, framework: str, platform: str, known_targets: Sequence[str]):
        known = list(known_targets)
        super().__init__(
            f"No injection configuration found for {framework} on {platform}. "
            f"Available: {', '.join(known) or 'none'}",
            {"framework": framework, "platform": platform, "known_targets": known},
        )
        self.framework = framework
        self.platform = platform
        self.known_targets = known


class InjectionIOError(SpinupError):
    """A template could not be read or a destination could not be written."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(
            f"Injection failed for {path}: {cause.strerror or cause}",
            {"path": path, "errno": cause.errno},
        )
        self.path = path
        self.cause = cause
