"""Command-line entry point for spinup."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import typer
from dotenv import find_dotenv, load_dotenv

from spinup import __version__
from spinup.config import get_settings
from spinup.core.events import EventDispatcher
from spinup.core.exceptions import SpinupError
from spinup.core.injector import FileInjector
from spinup.core.orchestrator import PipelineOrchestrator
from spinup.core.registry import lookup, supported_targets
from spinup.services.webhook import WebhookForwarder
from spinup.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="spinup",
    help="Install, build, inject platform config and deploy a web application.",
    no_args_is_help=True,
)

logger = get_logger(__name__)


@contextmanager
def _session() -> Iterator[EventDispatcher]:
    """Load .env, configure logging and yield a dispatcher with configured listeners.

    The webhook forwarder, if any, is closed when the command finishes.
    """
    # Without override, so real environment variables win over .env
    load_dotenv(find_dotenv(usecwd=True))
    get_settings.cache_clear()
    settings = get_settings()
    configure_logging(settings)

    dispatcher = EventDispatcher()
    forwarder = None
    if settings.deploy_webhook_url:
        forwarder = WebhookForwarder(
            settings.deploy_webhook_url,
            timeout=settings.deploy_webhook_timeout,
        )
        dispatcher.subscribe(forwarder)
        logger.info("webhook.enabled", url=settings.deploy_webhook_url)
    try:
        yield dispatcher
    finally:
        if forwarder is not None:
            forwarder.close()


def _fail(message: str) -> NoReturn:
    typer.secho(f"Deployment failed: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


@app.command()
def deploy(
    repo_path: str = typer.Argument(".", help="Repository to deploy"),
    environment: str = typer.Argument("preview", help="Target environment"),
    framework: str = typer.Argument("t3", help="Framework identifier"),
    platform: str = typer.Argument("cloudflare", help="Platform identifier"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the planned steps without running them"
    ),
):
    """Install, build, inject configuration and deploy a repository."""
    with _session() as dispatcher:
        orchestrator = PipelineOrchestrator(dispatcher=dispatcher)

        if dry_run:
            context, commands = orchestrator.plan(repo_path, environment, framework, platform)
            typer.echo(f"Repository: {context.repo_path}")
            typer.echo(f"Environment: {context.environment}")
            for step, argv in commands.items():
                typer.echo(f"{step.value}: {' '.join(argv)}")
            try:
                config = lookup(context.framework, context.platform)
            except SpinupError as e:
                _fail(e.message)
            typer.echo(f"inject: {', '.join(config.destinations)}")
            for variable in context.missing_credentials:
                typer.secho(f"Warning: {variable} not set", fg=typer.colors.YELLOW)
            return

        try:
            result = asyncio.run(orchestrator.run(repo_path, environment, framework, platform))
        except SpinupError as e:
            _fail(e.message)

    typer.secho(
        f"Deployment completed in {result.duration_ms / 1000:.2f}s",
        fg=typer.colors.GREEN,
    )


@app.command()
def inject(
    repo_path: str = typer.Argument(".", help="Repository to inject into"),
    framework: str = typer.Argument("nextjs", help="Framework identifier"),
    platform: str = typer.Argument("cloudflare", help="Platform identifier"),
):
    """Inject platform configuration files without installing or deploying."""
    with _session() as dispatcher:
        injector = FileInjector(dispatcher)
        try:
            files = asyncio.run(injector.inject(repo_path, framework, platform))
        except SpinupError as e:
            typer.secho(f"Injection failed: {e.message}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)

    for path in files:
        typer.echo(f"Created {path}")


@app.command()
def targets():
    """List supported framework-platform targets."""
    for key in supported_targets():
        typer.echo(key)


@app.command()
def version():
    """Show the spinup version."""
    typer.echo(__version__)
