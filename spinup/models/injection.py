"""Injection configuration models."""

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InjectionFile(BaseModel):
    """A template copied into the target repository."""

    model_config = ConfigDict(frozen=True)

    source: str  # relative to the package's templates directory
    destination: str  # relative to the target repository root

    @field_validator("destination")
    @classmethod
    def destination_inside_repo(cls, value: str) -> str:
        path = PurePosixPath(value)
        if not value or path.is_absolute() or ".." in path.parts:
            raise ValueError(
                f"destination must be a relative path inside the repository: {value!r}"
            )
        return value


class InjectionConfig(BaseModel):
    """Files to inject for one framework/platform pair."""

    model_config = ConfigDict(frozen=True)

    framework: str
    platform: str
    files: tuple[InjectionFile, ...] = Field(min_length=1)

    @property
    def key(self) -> str:
        """Registry key, e.g. ``nextjs-cloudflare``."""
        return f"{self.framework}-{self.platform}"

    @property
    def destinations(self) -> list[str]:
        """Destination paths in injection order."""
        return [f.destination for f in self.files]
