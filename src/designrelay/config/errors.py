"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a configuration value is invalid.

    ``name`` carries the environment variable at fault when there is exactly one.
    """

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""

    def __init__(self, names: tuple[str, ...]) -> None:
        super().__init__(
            f"Missing configuration for: {', '.join(names)}",
            name=names[0] if len(names) == 1 else None,
        )
        self.names = names
