"""
CLI for Notesbot.

Minimal CLI using stdlib. Subcommands are imported lazily so `--help`
does not pull in python-telegram-bot.

Usage:
    notesbot run                  # Start the Telegram bot
    notesbot health               # Check files and settings
    notesbot --help               # Show help
"""

import sys


def print_help() -> None:
    """Print help message."""
    print("""notesbot - student notes Telegram bot

Commands:
    notesbot run                  Start the bot (stops on SIGINT/SIGTERM)
    notesbot health               Check collection files and bot settings
    notesbot stats                Show record counts

Options:
    notesbot --help, -h           Show this help
    notesbot --version, -v        Show version

Configuration:
    ~/.config/notesbot/config.toml, or the environment:
    NOTESBOT_TELEGRAM_TOKEN       Bot token (BOT_TOKEN also accepted)
    NOTESBOT_ADMIN_ID             Admin's Telegram user ID (ADMIN_ID also accepted)
    NOTESBOT_HOME                 Data directory (default ~/notesbot)""")


def print_version() -> None:
    """Print version."""
    from notesbot import __version__
    print(f"notesbot {__version__}")


def cmd_run() -> int:
    """Start the Telegram bot."""
    from notesbot.telegram_bot import main as bot_main
    return bot_main()


def cmd_health() -> int:
    """Print the health report. Non-zero if any check failed."""
    from notesbot.health import format_health_report, run_health_check

    checks = run_health_check()
    print(format_health_report(checks))
    return 1 if any(status == "✗" for status, _ in checks.values()) else 0


def cmd_stats() -> int:
    """Show record counts."""
    from notesbot.config import get_bot_config
    from notesbot.store import JsonStore

    store = JsonStore(get_bot_config(require_token=False))

    try:
        stats = store.get_stats()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Notesbot Statistics")
    print("-" * 30)
    print(f"Total notes: {stats['total_notes']}")
    print(f"Subjects: {', '.join(stats['subjects']) or '-'}")
    print(f"Usage entries: {stats['usage_entries']}")
    print(f"Pending suggestions: {stats['pending_suggestions']}")
    return 0


def main() -> int:
    """Main entry point."""
    args = sys.argv[1:]

    if not args:
        print_help()
        return 0

    first_arg = args[0]

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return 0

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    if first_arg == "run":
        return cmd_run()

    if first_arg == "health":
        return cmd_health()

    if first_arg == "stats":
        return cmd_stats()

    print(f"Unknown command: {first_arg}", file=sys.stderr)
    print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
