"""
Reply rendering for Notesbot.

Plain text for Telegram; only note download links use Markdown.
"""

from datetime import datetime

from notesbot.store import Note, Suggestion, UsageLogEntry

WELCOME_TEXT = """👋 Welcome to the Student Notes Bot!

📚 Commands you can use:
/notes <subject> - Get Notes
/available - View Subjects and Titles
/suggest <subject> <title> <url> - Submit your notes for review"""

ADMIN_TEXT = """
👩‍🏫 Admin Only:
/upload <subject> <title> <url> - Add approved notes
/delete <subject> <title> - Delete a note
/usage - View usage logs
/reviews - View pending suggestions
/edit_subject <old_subject> <title> <new_subject> - Edit note subject
/edit_title <subject> <old_title> <new_title> - Edit note title"""


def format_welcome(is_admin: bool) -> str:
    """Command list; the admin also sees the curation commands."""
    if is_admin:
        return WELCOME_TEXT + ADMIN_TEXT
    return WELCOME_TEXT


def format_note_link(note: Note) -> str:
    """Markdown line with the note's download link."""
    return f"{note.title} - [Download PDF]({note.url})"


def format_available(notes: list[Note]) -> str:
    """Every note with its 1-based position."""
    if not notes:
        return "No notes available."

    message = "📚 Available Notes:\n\n"
    for index, note in enumerate(notes, start=1):
        message += f"{index}. Subject: {note.subject}, Title: {note.title}\n"
    return message


def format_timestamp(timestamp: str) -> str:
    """Render an ISO 8601 UTC timestamp in local time (01/31/2024, 09:15:00 AM)."""
    try:
        # fromisoformat only accepts a trailing Z from 3.11 on
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return moment.astimezone().strftime("%m/%d/%Y, %I:%M:%S %p")


def format_usage(entries: list[UsageLogEntry]) -> str:
    """One line per lookup, in the order given."""
    if not entries:
        return "No usage yet."

    return "\n".join(
        f"{entry.user} used {entry.command} {entry.subject} "
        f"at {format_timestamp(entry.timestamp)}"
        for entry in entries
    )


def format_reviews(suggestions: list[Suggestion]) -> str:
    """Pending suggestions, numbered from 1."""
    if not suggestions:
        return "No pending suggestions."

    lines = ["📃 Pending Suggestions:", ""]
    for i, s in enumerate(suggestions, start=1):
        lines.extend([
            f"#{i}",
            f"Subject: {s.subject}",
            f"Title: {s.title}",
            f"URL: {s.url}",
            f"From: {s.submitted_by}",
            "",
        ])
    return "\n".join(lines) + "\n"


def format_suggestion_notice(suggestion: Suggestion) -> str:
    """Direct message pushed to the admin for a new suggestion."""
    return (
        "📩 New note suggestion:\n"
        f"Subject: {suggestion.subject}\n"
        f"Title: {suggestion.title}\n"
        f"URL: {suggestion.url}\n"
        f"From: {suggestion.submitted_by}"
    )
