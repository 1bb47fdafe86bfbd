"""
Notesbot: a Telegram front-end for a student note-sharing community.

- Students look up notes by subject and suggest new ones
- One administrator curates the catalog
- Everything lives in three flat JSON files
"""

__version__ = "0.1.0"
