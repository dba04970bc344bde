"""Integration tests for the pipeline orchestrator with real child processes."""

from collections.abc import Callable
from pathlib import Path

import pytest

from spinup.core.events import BaseEvent, EventDispatcher
from spinup.core.exceptions import CommandFailure, SpawnFailure
from spinup.core.orchestrator import PipelineOrchestrator

# Fake package manager: logs its arguments, fails `run build` when asked to
FAKE_NPM = """
echo "npm $*" >> "$SPINUP_TEST_LOG"
if [ "$1" = "run" ] && [ -n "$FAIL_BUILD_WITH" ]; then
  exit "$FAIL_BUILD_WITH"
fi
exit 0
"""

FAKE_NPX = """
echo "npx $*" >> "$SPINUP_TEST_LOG"
test -f sst.config.ts && test -f wrangler.toml
"""


class TestPipelineWithProcesses:
    """Runs the pipeline against shell scripts standing in for npm and npx."""

    @pytest.fixture
    def command_log(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        log = tmp_path / "commands.log"
        monkeypatch.setenv("SPINUP_TEST_LOG", str(log))
        return log

    @pytest.fixture
    def fake_tools(
        self,
        make_tool: Callable[[str, str], Path],
        monkeypatch: pytest.MonkeyPatch,
        command_log: Path,
    ) -> None:
        monkeypatch.setenv("PACKAGE_MANAGER", str(make_tool("npm", FAKE_NPM)))
        monkeypatch.setenv("DEPLOY_COMMAND", str(make_tool("npx", FAKE_NPX)))

    @pytest.fixture
    def orchestrator(self, dispatcher: EventDispatcher) -> PipelineOrchestrator:
        return PipelineOrchestrator(dispatcher=dispatcher)

    @pytest.mark.asyncio
    async def test_successful_deployment(
        self,
        fake_tools: None,
        orchestrator: PipelineOrchestrator,
        recorded_events: list[BaseEvent],
        repo_dir: Path,
        command_log: Path,
    ):
        """Test successful deployment with real processes."""
        result = await orchestrator.run(repo_dir, "preview", "nextjs", "cloudflare")

        assert recorded_events[-1].type == "complete"
        assert recorded_events[-1].duration_ms >= 0
        assert result.files_injected == ["sst.config.ts", "wrangler.toml"]
        assert command_log.read_text().splitlines() == [
            "npm ci",
            "npm run build",
            "npx wrangler deploy --env=preview",
        ]

    @pytest.mark.asyncio
    async def test_build_exit_code_two(
        self,
        fake_tools: None,
        orchestrator: PipelineOrchestrator,
        recorded_events: list[BaseEvent],
        repo_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test build exit code is propagated."""
        monkeypatch.setenv("FAIL_BUILD_WITH", "2")

        with pytest.raises(CommandFailure) as exc_info:
            await orchestrator.run(repo_dir, "preview", "nextjs", "cloudflare")

        assert exc_info.value.exit_code == 2
        assert [e.type for e in recorded_events] == [
            "start",
            "install:start",
            "install:complete",
            "build:start",
            "build:error",
            "error",
        ]
        assert not (repo_dir / "sst.config.ts").exists()
        assert not (repo_dir / "wrangler.toml").exists()

    @pytest.mark.asyncio
    async def test_missing_package_manager(
        self,
        orchestrator: PipelineOrchestrator,
        recorded_events: list[BaseEvent],
        repo_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test missing package manager aborts at install."""
        monkeypatch.setenv("PACKAGE_MANAGER", "spinup-missing-npm")

        with pytest.raises(SpawnFailure):
            await orchestrator.run(repo_dir, "preview", "nextjs", "cloudflare")

        assert [e.type for e in recorded_events] == [
            "start",
            "install:start",
            "install:error",
            "error",
        ]
