"""
Command router for Notesbot.

Maps chat commands onto the record store. Knows nothing about Telegram:
handlers take a Sender and the whitespace-split arguments and return the
replies to send.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from notesbot.config import BotConfig
from notesbot.store import JsonStore, Note, Suggestion, UsageLogEntry
from notesbot.surfacing import (
    format_available,
    format_note_link,
    format_reviews,
    format_suggestion_notice,
    format_usage,
    format_welcome,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED_TEXT = "❌ Unauthorized"
USAGE_LIMIT = 10


class CommandError(Exception):
    """A command that ends with a single explanatory reply and no mutation."""

    def __init__(self, reply: str):
        super().__init__(reply)
        self.reply = reply


class UsageError(CommandError):
    """Required arguments are missing."""


class Unauthorized(CommandError):
    """Non-admin invoked an admin-only command."""

    def __init__(self) -> None:
        super().__init__(UNAUTHORIZED_TEXT)


class NoteNotFound(CommandError):
    """No note matches the given subject and title."""


@dataclass(frozen=True)
class Sender:
    """Who sent the command."""

    user_id: int
    username: str | None = None
    first_name: str | None = None

    @property
    def display_name(self) -> str | None:
        return self.username or self.first_name


@dataclass
class Reply:
    text: str
    markdown: bool = False


@dataclass
class CommandResult:
    """Replies to the sender plus messages to push to the admin."""

    replies: list[Reply] = field(default_factory=list)
    admin_notifications: list[str] = field(default_factory=list)

    @classmethod
    def text(cls, text: str) -> "CommandResult":
        return cls(replies=[Reply(text)])


@dataclass(frozen=True)
class Command:
    name: str
    handler: Callable[["CommandRouter", Sender, list[str]], CommandResult]
    admin_only: bool = False


class CommandRouter:
    """Dispatches parsed commands against the JSON store."""

    def __init__(self, config: BotConfig, store: JsonStore | None = None):
        self.config = config
        self.store = store or JsonStore(config)

    def is_admin(self, sender: Sender) -> bool:
        """Check if sender is the configured administrator."""
        # No admin configured means nobody is admin
        if not self.config.admin_id:
            return False
        return str(sender.user_id) == self.config.admin_id

    def dispatch(self, name: str, sender: Sender, args: list[str]) -> CommandResult:
        """
        Run a command.

        Raises KeyError for unknown commands. Storage faults propagate.
        """
        command = COMMANDS[name]

        try:
            if command.admin_only and not self.is_admin(sender):
                logger.warning(f"Unauthorized /{name} attempt from user {sender.user_id}")
                raise Unauthorized()
            return command.handler(self, sender, args)
        except CommandError as e:
            return CommandResult.text(e.reply)

    # Open commands

    def start(self, sender: Sender, args: list[str]) -> CommandResult:
        return CommandResult.text(format_welcome(self.is_admin(sender)))

    def notes(self, sender: Sender, args: list[str]) -> CommandResult:
        if not args:
            raise UsageError("Usage: /notes <subject>")
        subject = args[0].upper()

        matches = [n for n in self.store.load_notes() if n.subject == subject]
        if not matches:
            return CommandResult.text("No notes found.")

        result = CommandResult(
            replies=[Reply(format_note_link(note), markdown=True) for note in matches]
        )

        self.store.append_usage(UsageLogEntry(
            user=sender.display_name,
            user_id=sender.user_id,
            command="/notes",
            subject=subject,
        ))
        return result

    def available(self, sender: Sender, args: list[str]) -> CommandResult:
        return CommandResult.text(format_available(self.store.load_notes()))

    def suggest(self, sender: Sender, args: list[str]) -> CommandResult:
        if len(args) < 3:
            raise UsageError("❌ Usage: /suggest <subject> <title> <url>")
        subject, title, url = args[:3]

        suggestion = Suggestion(
            subject=subject,
            title=title,
            url=url,
            submitted_by=sender.display_name or "Unknown",
        )
        self.store.append_suggestion(suggestion)
        logger.info(f"Suggestion from {suggestion.submitted_by}: {suggestion.subject} {title}")

        return CommandResult(
            replies=[Reply("✅ Your note suggestion has been submitted for review.")],
            admin_notifications=[format_suggestion_notice(suggestion)],
        )

    # Admin commands

    def upload(self, sender: Sender, args: list[str]) -> CommandResult:
        if len(args) < 3:
            raise UsageError("Usage: /upload <subject> <title> <url>")
        subject, title, url = args[:3]

        note = Note(subject=subject, title=title, url=url)
        self.store.add_note(note)
        logger.info(f"Note added: {note.subject} {note.title}")
        return CommandResult.text(f"✅ Note added for {note.subject}")

    def delete(self, sender: Sender, args: list[str]) -> CommandResult:
        if len(args) < 2:
            raise UsageError("❌ Usage: /delete <subject> <title>")
        subject = args[0].upper()
        title = args[1]

        notes = self.store.load_notes()
        kept = [n for n in notes if not (n.subject == subject and n.title == title)]

        if len(kept) == len(notes):
            raise NoteNotFound(
                f'⚠️ No note found with subject "{subject}" and title "{title}".'
            )

        self.store.save_notes(kept)
        logger.info(f"Deleted {len(notes) - len(kept)} note(s): {subject} {title}")
        return CommandResult.text(
            f'✅ Note deleted for subject "{subject}", title "{title}".'
        )

    def usage(self, sender: Sender, args: list[str]) -> CommandResult:
        return CommandResult.text(format_usage(self.store.recent_usage(USAGE_LIMIT)))

    def reviews(self, sender: Sender, args: list[str]) -> CommandResult:
        return CommandResult.text(format_reviews(self.store.load_suggestions()))

    def _find_first(self, notes: list[Note], subject: str, title: str) -> Note:
        for note in notes:
            if note.subject == subject.upper() and note.title == title:
                return note
        raise NoteNotFound(
            f'No note found with subject "{subject}" and title "{title}".'
        )

    def edit_subject(self, sender: Sender, args: list[str]) -> CommandResult:
        if len(args) < 3:
            raise UsageError("Usage: /edit_subject <old_subject> <title> <new_subject>")
        old_subject, title, new_subject = args[:3]

        notes = self.store.load_notes()
        note = self._find_first(notes, old_subject, title)
        note.subject = new_subject.upper()
        self.store.save_notes(notes)

        logger.info(f"Subject changed {old_subject} -> {new_subject} for {title}")
        return CommandResult.text(
            f'✅ Subject updated from "{old_subject}" to "{new_subject}" for title "{title}".'
        )

    def edit_title(self, sender: Sender, args: list[str]) -> CommandResult:
        if len(args) < 3:
            raise UsageError("Usage: /edit_title <subject> <old_title> <new_title>")
        subject, old_title, new_title = args[:3]

        notes = self.store.load_notes()
        note = self._find_first(notes, subject, old_title)
        note.title = new_title
        self.store.save_notes(notes)

        logger.info(f"Title changed {old_title} -> {new_title} in {subject}")
        return CommandResult.text(
            f'✅ Title updated from "{old_title}" to "{new_title}" in subject "{subject}".'
        )


COMMANDS: dict[str, Command] = {
    command.name: command
    for command in (
        Command("start", CommandRouter.start),
        Command("notes", CommandRouter.notes),
        Command("available", CommandRouter.available),
        Command("suggest", CommandRouter.suggest),
        Command("upload", CommandRouter.upload, admin_only=True),
        Command("delete", CommandRouter.delete, admin_only=True),
        Command("usage", CommandRouter.usage, admin_only=True),
        Command("reviews", CommandRouter.reviews, admin_only=True),
        Command("edit_subject", CommandRouter.edit_subject, admin_only=True),
        Command("edit_title", CommandRouter.edit_title, admin_only=True),
    )
}
