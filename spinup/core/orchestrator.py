"""Pipeline Orchestrator.

Runs the deployment steps in order to turn a checked-out repository into a
deployed service:

1. install - install dependencies with the package manager
2. build   - run the project's build script
3. inject  - copy platform configuration templates into the repository
4. deploy  - invoke the platform deploy tool

The first failing step aborts the run. Its error is published as
``<step>:error`` and then ``error`` before being re-raised to the caller.
"""

import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from spinup.config import Settings
from spinup.core.events import (
    DeployCompleted,
    EventDispatcher,
    PipelineCompleted,
    PipelineFailed,
    PipelineStarted,
    StepCompleted,
    StepFailed,
    StepStarted,
)
from spinup.core.injector import FileInjector
from spinup.core.runner import CommandRunner
from spinup.models.pipeline import DeploymentResult, PipelineContext, Step
from spinup.utils.logging import get_logger


class PipelineOrchestrator:
    """Sequences install, build, inject and deploy with fail-fast semantics."""

    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        runner: CommandRunner | None = None,
        injector: FileInjector | None = None,
        settings: Settings | None = None,
    ):
        self.dispatcher = dispatcher or EventDispatcher()
        self.runner = runner or CommandRunner()
        if injector is None:
            injector = FileInjector(self.dispatcher)
        elif injector.dispatcher is not self.dispatcher:
            # Inject events must reach the same listeners as every other step.
            injector = FileInjector(
                self.dispatcher,
                templates_dir=injector.templates_dir,
                registry=injector.registry,
            )
        self.injector = injector
        self.settings = settings
        self.logger = get_logger("orchestrator")

    def build_context(
        self,
        repo_path: str | Path = ".",
        environment: str = "preview",
        framework: str = "t3",
        platform: str = "cloudflare",
    ) -> PipelineContext:
        """Assemble the immutable context for one run.

        Settings are read from the environment at this point unless the
        orchestrator was given an explicit ``Settings`` instance.
        """
        settings = self.settings or Settings()
        return PipelineContext.build(repo_path, environment, framework, platform, settings)

    def plan(
        self,
        repo_path: str | Path = ".",
        environment: str = "preview",
        framework: str = "t3",
        platform: str = "cloudflare",
    ) -> tuple[PipelineContext, dict[Step, list[str]]]:
        """Return the context and command lines a run would use, without running."""
        context = self.build_context(repo_path, environment, framework, platform)
        commands = context.commands
        return context, {
            Step.INSTALL: commands.install_argv(),
            Step.BUILD: commands.build_argv(),
            Step.DEPLOY: commands.deploy_argv(context.environment),
        }

    async def run(
        self,
        repo_path: str | Path = ".",
        environment: str = "preview",
        framework: str = "t3",
        platform: str = "cloudflare",
    ) -> DeploymentResult:
        """Run the complete pipeline.

        Args:
            repo_path: Repository to deploy
            environment: Target environment label passed to the deploy tool
            framework: Framework identifier used to select injected files
            platform: Platform identifier used to select injected files

        Returns:
            The deployment result

        Raises:
            SpinupError: The first step failure, unmodified
        """
        start_time = time.monotonic()
        context = self.build_context(repo_path, environment, framework, platform)

        try:
            self.dispatcher.dispatch(
                PipelineStarted(
                    repo_path=str(context.repo_path),
                    environment=context.environment,
                )
            )
            self.logger.info(
                "pipeline.started",
                repo_path=str(context.repo_path),
                environment=context.environment,
                framework=context.framework,
                platform=context.platform,
            )

            await self._run_step(Step.INSTALL, lambda: self._install(context))
            await self._run_step(Step.BUILD, lambda: self._build(context))
            files_injected = await self.injector.inject(
                context.repo_path, context.framework, context.platform
            )
            self._warn_missing_credentials(context)
            await self._run_step(Step.DEPLOY, lambda: self._deploy(context))

        except Exception as e:
            self.dispatcher.dispatch(PipelineFailed(error=e))
            self.logger.error("pipeline.failed", error=str(e), error_type=type(e).__name__)
            raise

        duration_ms = int((time.monotonic() - start_time) * 1000)
        self.dispatcher.dispatch(PipelineCompleted(duration_ms=duration_ms))
        self.logger.info(
            "pipeline.completed",
            duration=f"{duration_ms / 1000:.2f}s",
        )

        return DeploymentResult(
            repo_path=str(context.repo_path),
            environment=context.environment,
            duration_ms=duration_ms,
            files_injected=files_injected,
        )

    async def _run_step(self, step: Step, action: Callable[[], Awaitable[None]]) -> None:
        """Wrap a command step with its start, complete and error events."""
        self.dispatcher.dispatch(StepStarted(type=f"{step.value}:start"))
        self.logger.info("step.started", step=step.value)

        try:
            await action()
        except Exception as e:
            self.dispatcher.dispatch(StepFailed(type=f"{step.value}:error", error=e))
            raise

        if step is Step.DEPLOY:
            self.dispatcher.dispatch(DeployCompleted())
        else:
            self.dispatcher.dispatch(StepCompleted(type=f"{step.value}:complete"))
        self.logger.info("step.completed", step=step.value)

    async def _install(self, context: PipelineContext) -> None:
        command, *args = context.commands.install_argv()
        await self.runner.run(command, args, cwd=context.repo_path)

    async def _build(self, context: PipelineContext) -> None:
        command, *args = context.commands.build_argv()
        await self.runner.run(command, args, cwd=context.repo_path)

    async def _deploy(self, context: PipelineContext) -> None:
        command, *args = context.commands.deploy_argv(context.environment)
        await self.runner.run(command, args, cwd=context.repo_path)

    def _warn_missing_credentials(self, context: PipelineContext) -> None:
        for variable in context.missing_credentials:
            self.logger.warning("deploy.credentials_missing", variable=variable)
