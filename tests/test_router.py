import pytest

from notesbot.router import COMMANDS, UNAUTHORIZED_TEXT, Sender
from notesbot.store import Note, UsageLogEntry


def texts(result):
    return [reply.text for reply in result.replies]


def only_text(result):
    [text] = texts(result)
    return text


def seed(store, *notes):
    for subject, title, url in notes:
        store.add_note(Note(subject=subject, title=title, url=url))


# start


def test_start_student_sees_basic_commands(router, student):
    text = only_text(router.dispatch("start", student, []))
    assert "/notes <subject>" in text
    assert "/upload" not in text


def test_start_admin_sees_admin_commands(router, admin):
    text = only_text(router.dispatch("start", admin, []))
    assert "/notes <subject>" in text
    assert "Admin Only" in text
    assert "/edit_title <subject> <old_title> <new_title>" in text


def test_admin_id_compared_as_text(router):
    assert router.is_admin(Sender(user_id=111))
    assert not router.is_admin(Sender(user_id=1110))


def test_no_admin_configured(config, store):
    from dataclasses import replace
    from notesbot.router import CommandRouter

    router = CommandRouter(replace(config, admin_id=""), store)
    assert not router.is_admin(Sender(user_id=0))


# upload / available


def test_upload_then_available(router, admin, student):
    result = router.dispatch("upload", admin, ["phy", "Waves", "https://x/w.pdf"])
    assert only_text(result) == "✅ Note added for PHY"

    listing = only_text(router.dispatch("available", student, []))
    assert listing.count("Subject: PHY, Title: Waves") == 1
    assert "1. Subject: PHY, Title: Waves\n" in listing


def test_available_empty(router, student):
    assert only_text(router.dispatch("available", student, [])) == "No notes available."


def test_upload_missing_args(router, admin, store):
    result = router.dispatch("upload", admin, ["phy", "Waves"])
    assert only_text(result) == "Usage: /upload <subject> <title> <url>"
    assert store.load_notes() == []


def test_upload_allows_duplicates(router, admin, store):
    router.dispatch("upload", admin, ["phy", "Waves", "u1"])
    router.dispatch("upload", admin, ["PHY", "Waves", "u2"])
    assert [n.url for n in store.load_notes()] == ["u1", "u2"]


# notes


def test_notes_lists_links_and_logs(router, student, store):
    seed(store, ("PHY", "Waves", "https://x/w.pdf"), ("PHY", "Optics", "https://x/o.pdf"),
         ("CHEM", "Acids", "https://x/a.pdf"))

    result = router.dispatch("notes", student, ["phy"])

    assert texts(result) == [
        "Waves - [Download PDF](https://x/w.pdf)",
        "Optics - [Download PDF](https://x/o.pdf)",
    ]
    assert all(reply.markdown for reply in result.replies)

    [entry] = store.recent_usage()
    assert entry.user == "kim"
    assert entry.user_id == 222
    assert entry.command == "/notes"
    assert entry.subject == "PHY"


def test_notes_log_falls_back_to_first_name(router, store):
    seed(store, ("PHY", "Waves", "u"))
    router.dispatch("notes", Sender(user_id=5, first_name="Lee"), ["PHY"])
    assert store.recent_usage()[0].user == "Lee"


def test_notes_none_found_does_not_log(router, student, store):
    assert only_text(router.dispatch("notes", student, ["bio"])) == "No notes found."
    assert store.recent_usage() == []


def test_notes_missing_subject(router, student):
    assert only_text(router.dispatch("notes", student, [])) == "Usage: /notes <subject>"


# suggest / reviews


def test_suggest_notifies_admin_once(router, student, store):
    result = router.dispatch("suggest", student, ["bio", "Cells", "https://x/c.pdf"])

    assert only_text(result) == "✅ Your note suggestion has been submitted for review."
    [notice] = result.admin_notifications
    assert notice == (
        "📩 New note suggestion:\n"
        "Subject: BIO\n"
        "Title: Cells\n"
        "URL: https://x/c.pdf\n"
        "From: kim"
    )

    [saved] = store.load_suggestions()
    assert (saved.subject, saved.title, saved.url, saved.submitted_by) == (
        "BIO", "Cells", "https://x/c.pdf", "kim"
    )


def test_suggest_unknown_submitter(router, store):
    router.dispatch("suggest", Sender(user_id=9), ["bio", "Cells", "u"])
    assert store.load_suggestions()[0].submitted_by == "Unknown"


def test_suggest_missing_args(router, student, store):
    result = router.dispatch("suggest", student, ["bio"])
    assert only_text(result) == "❌ Usage: /suggest <subject> <title> <url>"
    assert result.admin_notifications == []
    assert store.load_suggestions() == []


def test_reviews_lists_suggestions(router, admin, student):
    router.dispatch("suggest", student, ["bio", "Cells", "u1"])
    router.dispatch("suggest", student, ["chem", "Acids", "u2"])

    text = only_text(router.dispatch("reviews", admin, []))
    assert text.startswith("📃 Pending Suggestions:\n\n#1\nSubject: BIO\nTitle: Cells\n")
    assert "#2\nSubject: CHEM\nTitle: Acids\nURL: u2\nFrom: kim\n\n" in text


def test_reviews_empty(router, admin):
    assert only_text(router.dispatch("reviews", admin, [])) == "No pending suggestions."


# delete


def test_delete_removes_all_matches(router, admin, store):
    seed(store, ("PHY", "Waves", "u1"), ("PHY", "Optics", "u2"), ("PHY", "Waves", "u3"))

    result = router.dispatch("delete", admin, ["phy", "Waves"])

    assert only_text(result) == '✅ Note deleted for subject "PHY", title "Waves".'
    assert [n.title for n in store.load_notes()] == ["Optics"]


def test_delete_title_is_case_sensitive(router, admin, store, config):
    seed(store, ("PHY", "Waves", "u1"))
    before = config.notes_path.read_bytes()

    result = router.dispatch("delete", admin, ["PHY", "waves"])

    assert only_text(result) == '⚠️ No note found with subject "PHY" and title "waves".'
    assert config.notes_path.read_bytes() == before


def test_delete_missing_args(router, admin):
    assert only_text(router.dispatch("delete", admin, ["PHY"])) == (
        "❌ Usage: /delete <subject> <title>"
    )


# edits


def test_edit_subject_first_match_only(router, admin, store):
    seed(store, ("PHY", "Waves", "u1"), ("PHY", "Waves", "u2"))

    result = router.dispatch("edit_subject", admin, ["phy", "Waves", "mech"])

    assert only_text(result) == (
        '✅ Subject updated from "phy" to "mech" for title "Waves".'
    )
    assert [(n.subject, n.url) for n in store.load_notes()] == [
        ("MECH", "u1"), ("PHY", "u2")
    ]


def test_edit_title_first_match_only(router, admin, store):
    seed(store, ("PHY", "Waves", "u1"), ("PHY", "Waves", "u2"))

    result = router.dispatch("edit_title", admin, ["phy", "Waves", "Sound"])

    assert only_text(result) == (
        '✅ Title updated from "Waves" to "Sound" in subject "phy".'
    )
    assert [(n.title, n.url) for n in store.load_notes()] == [
        ("Sound", "u1"), ("Waves", "u2")
    ]


@pytest.mark.parametrize("command", ["edit_subject", "edit_title"])
def test_edit_not_found(router, admin, store, config, command):
    seed(store, ("PHY", "Waves", "u1"))
    before = config.notes_path.read_bytes()

    result = router.dispatch(command, admin, ["chem", "Waves", "x"])

    assert only_text(result) == 'No note found with subject "chem" and title "Waves".'
    assert config.notes_path.read_bytes() == before


@pytest.mark.parametrize("command,usage", [
    ("edit_subject", "Usage: /edit_subject <old_subject> <title> <new_subject>"),
    ("edit_title", "Usage: /edit_title <subject> <old_title> <new_title>"),
])
def test_edit_missing_args(router, admin, command, usage):
    assert only_text(router.dispatch(command, admin, ["PHY", "Waves"])) == usage


# usage


def test_usage_last_ten_newest_first(router, admin, student, store):
    seed(store, ("PHY", "Waves", "u1"))
    for _ in range(15):
        router.dispatch("notes", student, ["PHY"])

    text = only_text(router.dispatch("usage", admin, []))
    lines = text.split("\n")
    assert len(lines) == 10
    assert all(line.startswith("kim used /notes PHY at ") for line in lines)
    assert len(store.load("logs")) == 15


def test_usage_orders_by_recency(router, admin, store):
    store.append_usage(UsageLogEntry(user="old", user_id=1, subject="PHY"))
    store.append_usage(UsageLogEntry(user="new", user_id=2, subject="CHEM"))

    lines = only_text(router.dispatch("usage", admin, [])).split("\n")
    assert lines[0].startswith("new used /notes CHEM")
    assert lines[1].startswith("old used /notes PHY")


def test_usage_empty(router, admin):
    assert only_text(router.dispatch("usage", admin, [])) == "No usage yet."


# authorization


ADMIN_CALLS = [
    ("upload", ["phy", "Waves", "u"]),
    ("delete", ["PHY", "Waves"]),
    ("usage", []),
    ("reviews", []),
    ("edit_subject", ["PHY", "Waves", "MECH"]),
    ("edit_title", ["PHY", "Waves", "Sound"]),
    ("upload", []),
]


@pytest.mark.parametrize("command,args", ADMIN_CALLS)
def test_admin_commands_denied_for_students(router, admin, student, store, config,
                                            command, args):
    seed(store, ("PHY", "Waves", "u1"))
    router.dispatch("suggest", student, ["bio", "Cells", "u"])
    router.dispatch("notes", student, ["PHY"])
    paths = [config.notes_path, config.logs_path, config.suggestions_path]
    before = [p.read_bytes() for p in paths]

    result = router.dispatch(command, student, args)

    assert only_text(result) == UNAUTHORIZED_TEXT
    assert result.admin_notifications == []
    assert [p.read_bytes() for p in paths] == before


def test_denied_before_store_is_touched(router, student, config):
    router.dispatch("usage", student, [])
    assert not config.logs_path.exists()


def test_admin_flags():
    admin_only = {name for name, command in COMMANDS.items() if command.admin_only}
    assert admin_only == {
        "upload", "delete", "usage", "reviews", "edit_subject", "edit_title"
    }


def test_unknown_command(router, student):
    with pytest.raises(KeyError):
        router.dispatch("purge", student, [])


def test_storage_fault_propagates(router, admin, config):
    config.notes_path.write_text("not json")
    with pytest.raises(ValueError):
        router.dispatch("available", admin, [])


def test_edit_keeps_extra_fields_on_other_notes(router, admin, store, config):
    store.save("notes", [
        {"subject": "PHY", "title": "Waves", "url": "u1", "added_by": "ops"},
        {"subject": "PHY", "title": "Optics", "url": "u2", "added_by": "ops"},
    ])

    router.dispatch("edit_title", admin, ["PHY", "Optics", "Light"])

    assert store.load("notes") == [
        {"subject": "PHY", "title": "Waves", "url": "u1", "added_by": "ops"},
        {"subject": "PHY", "title": "Light", "url": "u2", "added_by": "ops"},
    ]


def test_available_lists_note_without_url(router, student, store):
    store.save("notes", [{"subject": "PHY", "title": "Waves"}])

    text = only_text(router.dispatch("available", student, []))
    assert "1. Subject: PHY, Title: Waves" in text
