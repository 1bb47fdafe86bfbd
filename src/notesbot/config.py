"""
Configuration management for Notesbot.

Uses XDG base directories:
- Config: ~/.config/notesbot/config.toml
- Data: ~/notesbot/ (notes.json, logs.json, suggestions.json)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / "notesbot"

DEFAULT_FILES = {
    "notes": "notes.json",
    "logs": "logs.json",
    "suggestions": "suggestions.json",
}


@dataclass(frozen=True)
class BotConfig:
    """Process-wide settings, fixed at startup."""

    token: str
    admin_id: str
    notes_path: Path
    logs_path: Path
    suggestions_path: Path

    def path_for(self, collection: str) -> Path:
        """Get the file backing a collection."""
        paths = {
            "notes": self.notes_path,
            "logs": self.logs_path,
            "suggestions": self.suggestions_path,
        }
        if collection not in paths:
            raise ValueError(f"Unknown collection: {collection}")
        return paths[collection]


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/notesbot)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "notesbot"


def get_notesbot_home() -> Path:
    """Get the data directory (~/notesbot or NOTESBOT_HOME)."""
    if env_home := os.environ.get("NOTESBOT_HOME"):
        return Path(env_home)
    return DEFAULT_DATA_HOME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_collection_path(collection: str, config: dict[str, Any] | None = None) -> Path:
    """Resolve a collection file, honouring [storage] overrides."""
    if collection not in DEFAULT_FILES:
        raise ValueError(f"Unknown collection: {collection}")

    storage = (config or {}).get("storage", {})
    path = Path(storage.get(f"{collection}_file", DEFAULT_FILES[collection]))
    if path.is_absolute():
        return path
    return get_notesbot_home() / path


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return get_default_config()

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        return tomli.load(f)


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "notesbot": {
            "home": str(get_notesbot_home()),
        },
        "storage": {
            f"{name}_file": filename for name, filename in DEFAULT_FILES.items()
        },
    }


def get_admin_id(config: dict[str, Any] | None = None) -> str:
    """Administrator's Telegram user ID as text, or "" when unset."""
    tg_config = (config or {}).get("telegram", {})
    admin_id = (
        tg_config.get("admin_id")
        or os.environ.get("NOTESBOT_ADMIN_ID")
        or os.environ.get("ADMIN_ID")
        or ""
    )
    return str(admin_id).strip()


def get_token(config: dict[str, Any] | None = None) -> str | None:
    """Bot token from config or environment."""
    tg_config = (config or {}).get("telegram", {})
    return (
        tg_config.get("token")
        or os.environ.get("NOTESBOT_TELEGRAM_TOKEN")
        or os.environ.get("BOT_TOKEN")
    )


def get_bot_config(
    config: dict[str, Any] | None = None,
    require_token: bool = True,
) -> BotConfig:
    """Build the immutable bot configuration."""
    if config is None:
        config = load_config()

    token = get_token(config) or ""
    if require_token and not token:
        raise ValueError(
            "Telegram bot token not found. "
            "Set NOTESBOT_TELEGRAM_TOKEN env var or add to config.toml"
        )

    return BotConfig(
        token=token,
        admin_id=get_admin_id(config),
        notes_path=get_collection_path("notes", config),
        logs_path=get_collection_path("logs", config),
        suggestions_path=get_collection_path("suggestions", config),
    )
