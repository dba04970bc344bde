"""Injection registry: which templates a framework/platform pair needs."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from spinup.core.exceptions import UnknownTarget
from spinup.models.injection import InjectionConfig, InjectionFile

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _build_registry(configs: Iterable[InjectionConfig]) -> Mapping[str, InjectionConfig]:
    return MappingProxyType({config.key: config for config in configs})


INJECTION_CONFIGS: Mapping[str, InjectionConfig] = _build_registry(
    [
        InjectionConfig(
            framework="nextjs",
            platform="cloudflare",
            files=(
                InjectionFile(source="sst.config.ts", destination="sst.config.ts"),
                InjectionFile(source="wrangler.toml", destination="wrangler.toml"),
            ),
        ),
    ]
)


def supported_targets(
    registry: Mapping[str, InjectionConfig] = INJECTION_CONFIGS,
) -> list[str]:
    """List registered ``framework-platform`` keys."""
    return list(registry)


def lookup(
    framework: str,
    platform: str,
    registry: Mapping[str, InjectionConfig] = INJECTION_CONFIGS,
) -> InjectionConfig:
    """Return the injection config for an exact framework/platform pair.

    Raises:
        UnknownTarget: If the pair is not registered
    """
    config = registry.get(f"{framework}-{platform}")
    if config is None or (config.framework, config.platform) != (framework, platform):
        raise UnknownTarget(framework, platform, supported_targets(registry))
    return config
