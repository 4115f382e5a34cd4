"""Configuration management for Peppermint."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

STRATEGIES = ("broadcast", "registry")
SURFACE_KINDS = ("worker", "page")

DEFAULT_STATE_DIR = Path.home() / ".local" / "share" / "peppermint"


@dataclass
class DeliveryConfig:
    """How notifications look and how long duplicates are suppressed."""

    tag_prefix: str = "peppermint"
    suppression_window_ms: int = 1000
    default_title: str = "Peppermint Tracker"
    default_body: str = "New update!"
    icon: str = "/icon-192.png"
    badge: str = "/icon-96.png"
    require_interaction: bool = False

    @property
    def window_seconds(self) -> float:
        return self.suppression_window_ms / 1000.0


@dataclass
class CoordinationConfig:
    """Suppression strategy shared by the surfaces of one device."""

    strategy: str = "broadcast"  # "broadcast" or "registry"
    channel_dir: Path = DEFAULT_STATE_DIR / "channel"
    retention_seconds: float = 10.0


@dataclass
class SurfaceConfig:
    """The surface run by `python -m peppermint --surface`."""

    kind: str = "worker"  # "worker" or "page"
    name: str = ""
    visible: bool = False
    focused: bool = False


@dataclass
class InboxConfig:
    """Directory where pushed payloads are dropped for surface processes."""

    path: Path = DEFAULT_STATE_DIR / "inbox"


@dataclass
class SMSConfig:
    """SMS/WhatsApp configuration for Twilio."""

    enabled: bool = False
    account_sid: str = ""
    auth_token: str = ""
    from_number: str = ""
    to_number: str = ""
    use_whatsapp: bool = False


@dataclass
class Config:
    """Main configuration."""

    delivery: DeliveryConfig = field(default_factory=DeliveryConfig)
    coordination: CoordinationConfig = field(default_factory=CoordinationConfig)
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    inbox: InboxConfig = field(default_factory=InboxConfig)
    sms: SMSConfig = field(default_factory=SMSConfig)
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        coordination = dict(data.get("coordination", {}))
        if "channel_dir" in coordination:
            coordination["channel_dir"] = Path(coordination["channel_dir"]).expanduser()
        inbox = dict(data.get("inbox", {}))
        if "path" in inbox:
            inbox["path"] = Path(inbox["path"]).expanduser()

        try:
            config = cls(
                delivery=DeliveryConfig(**data.get("delivery", {})),
                coordination=CoordinationConfig(**coordination),
                surface=SurfaceConfig(**data.get("surface", {})),
                inbox=InboxConfig(**inbox),
                sms=SMSConfig(**data.get("sms", {})),
                log_file=Path(data["log_file"]) if data.get("log_file") else None,
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        config.validate()
        return config

    def validate(self) -> None:
        """
        Check enumerated settings.

        Raises:
            ConfigError: On an unknown strategy, surface kind or window.
        """
        if self.coordination.strategy not in STRATEGIES:
            raise ConfigError(
                f"Unknown coordination strategy {self.coordination.strategy!r}; "
                f"expected one of {', '.join(STRATEGIES)}"
            )
        if self.surface.kind not in SURFACE_KINDS:
            raise ConfigError(
                f"Unknown surface kind {self.surface.kind!r}; "
                f"expected one of {', '.join(SURFACE_KINDS)}"
            )
        if self.delivery.suppression_window_ms < 0:
            raise ConfigError("suppression_window_ms must not be negative")

    def apply_env(self) -> None:
        """Fill Twilio secrets from the environment (and .env)."""
        self.sms.account_sid = os.environ.get(
            "PEPPERMINT_TWILIO_ACCOUNT_SID", self.sms.account_sid
        )
        self.sms.auth_token = os.environ.get(
            "PEPPERMINT_TWILIO_AUTH_TOKEN", self.sms.auth_token
        )


def load_config(path: Path, env_file: Optional[Path] = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        path: Path to config file.
        env_file: Optional .env file with secrets; defaults to searching
                  from the working directory.

    Returns:
        Config object (defaults if file doesn't exist).

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values.
    """
    load_dotenv(dotenv_path=env_file)

    if not path.exists():
        config = Config()
    else:
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Cannot parse {path}: {e}") from e
        config = Config.from_dict(data)

    config.apply_env()
    return config


def get_default_config_toml() -> str:
    """Return default configuration as TOML string."""
    return '''# Peppermint Configuration

[delivery]
tag_prefix = "peppermint"
suppression_window_ms = 1000   # identical text inside this window is shown once
default_title = "Peppermint Tracker"
default_body = "New update!"
icon = "/icon-192.png"
badge = "/icon-96.png"
require_interaction = false

[coordination]
# "broadcast": surfaces announce claims to each other over channel_dir
# "registry": surfaces check the displayed notifications before rendering
strategy = "broadcast"
channel_dir = "~/.local/share/peppermint/channel"
retention_seconds = 10

[surface]
kind = "worker"       # "worker" or "page"
# name = "tab-1"
visible = false
focused = false

[inbox]
path = "~/.local/share/peppermint/inbox"

# Deliver notifications as SMS/WhatsApp via Twilio (optional)
# Secrets can also come from PEPPERMINT_TWILIO_ACCOUNT_SID and
# PEPPERMINT_TWILIO_AUTH_TOKEN (or a .env file).
[sms]
enabled = false
# from_number = "+1234567890"
# to_number = "+0987654321"

# Uncomment to enable file logging
# log_file = "~/.local/share/peppermint/peppermint.log"
'''
