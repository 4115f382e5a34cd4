"""Exception types for Peppermint."""


class PeppermintError(Exception):
    """Base class for all Peppermint errors."""


class ConfigError(PeppermintError):
    """Raised when the configuration names an unknown strategy or surface."""


class RenderError(PeppermintError):
    """Raised by a renderer when the platform refused to show a notification."""
