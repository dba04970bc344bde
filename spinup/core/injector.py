"""Copies platform configuration templates into a target repository."""

from collections.abc import Mapping
from pathlib import Path

from spinup.core.events import EventDispatcher, InjectCompleted, InjectStarted, StepFailed
from spinup.core.exceptions import InjectionIOError, UnknownTarget
from spinup.core.registry import INJECTION_CONFIGS, TEMPLATES_DIR, lookup
from spinup.models.injection import InjectionConfig
from spinup.utils.logging import get_logger


class FileInjector:
    """Materializes the registry's template files for one target.

    Files are written sequentially in registry order, overwriting whatever is
    at the destination. A failure stops at the offending file; files written
    before it are left in place.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        templates_dir: Path = TEMPLATES_DIR,
        registry: Mapping[str, InjectionConfig] = INJECTION_CONFIGS,
    ):
        self.dispatcher = dispatcher or EventDispatcher()
        self.templates_dir = templates_dir
        self.registry = registry
        self.logger = get_logger("injector")

    async def inject(self, repo_path: str | Path, framework: str, platform: str) -> list[str]:
        """Inject the files registered for ``framework`` on ``platform``.

        Args:
            repo_path: Root of the target repository
            framework: Framework identifier, e.g. ``nextjs``
            platform: Platform identifier, e.g. ``cloudflare``

        Returns:
            Destination paths written, in the order written

        Raises:
            UnknownTarget: If the pair is not registered (nothing is written)
            InjectionIOError: If a template cannot be read or a destination
                cannot be written
        """
        try:
            config = lookup(framework, platform, self.registry)
        except UnknownTarget as e:
            self.dispatcher.dispatch(StepFailed(type="inject:error", error=e))
            raise

        self.dispatcher.dispatch(
            InjectStarted(framework=framework, platform=platform)
        )
        self.logger.info(
            "inject.started",
            framework=framework,
            platform=platform,
            files=len(config.files),
        )

        repo_root = Path(repo_path).resolve()
        injected: list[str] = []

        try:
            for file in config.files:
                source = self.templates_dir / file.source
                destination = repo_root / file.destination
                self._copy(source, destination)
                injected.append(file.destination)
                self.logger.info("inject.file_written", destination=file.destination)
        except InjectionIOError as e:
            self.dispatcher.dispatch(StepFailed(type="inject:error", error=e))
            raise

        self.dispatcher.dispatch(InjectCompleted(files_injected=injected))
        self.logger.info("inject.completed", files_injected=injected)

        return injected

    def _copy(self, source: Path, destination: Path) -> None:
        try:
            content = source.read_bytes()
        except OSError as e:
            raise InjectionIOError(str(source), e) from e

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(content)
        except OSError as e:
            raise InjectionIOError(str(destination), e) from e
