"""Pipeline data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from spinup.config import Settings


class Step(str, Enum):
    """Pipeline steps, in execution order."""

    INSTALL = "install"
    BUILD = "build"
    INJECT = "inject"
    DEPLOY = "deploy"


class CommandOverrides(BaseModel):
    """Executables and subcommands used by the install, build and deploy steps."""

    model_config = ConfigDict(frozen=True)

    package_manager: str = "npm"
    install_command: str = "ci"
    build_command: str = "run"
    build_script: str = "build"
    deploy_command: str = "npx"
    deploy_tool: str = "wrangler"
    deploy_action: str = "deploy"

    @classmethod
    def from_settings(cls, settings: Settings) -> "CommandOverrides":
        return cls(
            package_manager=settings.package_manager,
            install_command=settings.install_command,
            build_command=settings.build_command,
            build_script=settings.build_script,
            deploy_command=settings.deploy_command,
            deploy_tool=settings.deploy_tool,
            deploy_action=settings.deploy_action,
        )

    def install_argv(self) -> list[str]:
        return [self.package_manager, self.install_command]

    def build_argv(self) -> list[str]:
        return [self.package_manager, self.build_command, self.build_script]

    def deploy_argv(self, environment: str) -> list[str]:
        return [
            self.deploy_command,
            self.deploy_tool,
            self.deploy_action,
            f"--env={environment}",
        ]


class PipelineContext(BaseModel):
    """Everything one pipeline run needs, assembled once at start."""

    model_config = ConfigDict(frozen=True)

    repo_path: Path
    environment: str = "preview"
    framework: str = "t3"
    platform: str = "cloudflare"
    commands: CommandOverrides = Field(default_factory=CommandOverrides)
    missing_credentials: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        repo_path: str | Path,
        environment: str,
        framework: str,
        platform: str,
        settings: Settings,
    ) -> "PipelineContext":
        """Resolve the repository path and snapshot the configured commands."""
        return cls(
            repo_path=Path(repo_path).resolve(),
            environment=environment,
            framework=framework,
            platform=platform,
            commands=CommandOverrides.from_settings(settings),
            missing_credentials=settings.missing_credentials,
        )


class DeploymentResult(BaseModel):
    """Outcome of a successful pipeline run."""

    repo_path: str
    environment: str
    duration_ms: int = 0
    files_injected: list[str] = Field(default_factory=list)
    url: str | None = None
