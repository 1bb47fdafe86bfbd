"""
Health check module for Notesbot.

Reports the state of the three collection files and the bot settings.
"""

import json
from typing import Any

from notesbot.config import get_admin_id, get_collection_path, get_token, load_config
from notesbot.store import COLLECTIONS


def check_collection(collection: str, config: dict[str, Any]) -> tuple[str, str]:
    """Check that a collection file is a readable JSON array."""
    path = get_collection_path(collection, config)
    if not path.exists():
        return "✓", "Empty (created on first use)"

    try:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers both JSONDecodeError and UnicodeDecodeError
        return "✗", f"Error: {e}"

    if not isinstance(records, list):
        return "✗", "Not a JSON array"
    return "✓", f"OK ({len(records)} records)"


def check_telegram(config: dict[str, Any]) -> tuple[str, str]:
    """Check Telegram bot settings."""
    if not get_token(config):
        return "✗", "No token"

    admin_id = get_admin_id(config)
    if not admin_id:
        return "!", "No admin configured"

    return "✓", f"OK (admin {admin_id})"


def run_health_check() -> dict[str, tuple[str, str]]:
    """Run all health checks."""
    config = load_config()
    checks = {
        collection.title(): check_collection(collection, config)
        for collection in COLLECTIONS
    }
    checks["Telegram"] = check_telegram(config)
    return checks


def format_health_report(checks: dict[str, tuple[str, str]]) -> str:
    """Format health check results."""
    lines = ["Notesbot Health Check", "-" * 40]

    for name, (status, message) in checks.items():
        lines.append(f"{status} {name}: {message}")

    return "\n".join(lines)
