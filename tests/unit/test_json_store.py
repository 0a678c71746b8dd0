"""
Tests for the flat-file document store.
"""

import json

import pytest

from app.db.json_store import JsonStore, PersistenceError, generate_id
from app.services.core.contact_service import ContactLifecycleService

DEFAULT_SETTINGS = {
    "allowed_email_domain": "kprit.edu.in",
    "credits_per_approval": "1",
    "max_pending_contacts_per_user": "10",
}


def test_absent_file_loads_default_document(store_path):
    store = JsonStore(store_path, DEFAULT_SETTINGS).open()

    assert store.users == []
    assert store.contacts == []
    assert store.get_setting("allowed_email_domain") == "kprit.edu.in"
    assert store.get_int_setting("credits_per_approval", 99) == 1
    # Nothing is written until the first mutation
    assert not store_path.exists()


def test_unparseable_file_falls_back_to_defaults(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json", encoding="utf-8")

    store = JsonStore(store_path, DEFAULT_SETTINGS).open()

    assert store.users == []
    assert store.get_int_setting("max_pending_contacts_per_user", 0) == 10


def test_invalid_utf8_file_falls_back_to_defaults(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_bytes(b'{"users": [\xff\xfe]}')

    store = JsonStore(store_path, DEFAULT_SETTINGS).open()

    assert store.users == []
    assert store.get_setting("allowed_email_domain") == "kprit.edu.in"


def test_close_after_fallback_leaves_file_untouched(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json", encoding="utf-8")

    store = JsonStore(store_path, DEFAULT_SETTINGS).open()
    store.close()

    assert store_path.read_text(encoding="utf-8") == "{not json"
    assert not store.is_open


def test_schema_invalid_file_falls_back_to_defaults(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps({"users": [{"id": "u1"}]}), encoding="utf-8")

    store = JsonStore(store_path, DEFAULT_SETTINGS).open()

    assert store.users == []


def test_save_writes_expected_top_level_keys(store, add_user, store_path):
    add_user("u1")
    store.save()

    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert set(data) == {
        "users",
        "contacts",
        "approvals",
        "credits_history",
        "ai_templates",
        "settings",
    }
    assert data["settings"][0] == {"key": "allowed_email_domain", "value": "kprit.edu.in"}
    assert data["users"][0]["id"] == "u1"


def test_reload_reproduces_all_collections_in_order(store, add_user, submission, store_path):
    add_user("u1")
    add_user("u2")
    service = ContactLifecycleService(store)
    first = service.submit_contact("u1", submission())
    second = service.submit_contact("u2", submission(name="Raj Patel", company="Acme"))
    service.decide(first.id, "approved", "a1", "looks good")
    service.decide(second.id, "rejected", "a1")
    store.document.ai_templates.append({"id": "t1", "type": "email", "title": "Intro"})
    store.save()

    reloaded = JsonStore(store_path, {}).open()

    assert reloaded.users == store.users
    assert reloaded.contacts == store.contacts
    assert reloaded.approvals == store.approvals
    assert reloaded.credits_history == store.credits_history
    assert reloaded.document.ai_templates == [{"id": "t1", "type": "email", "title": "Intro"}]
    assert [c.id for c in reloaded.contacts] == [first.id, second.id]


def test_save_failure_raises_persistence_error(tmp_path):
    # Pointing the store at a directory makes the write fail
    store = JsonStore(tmp_path, DEFAULT_SETTINGS)

    with pytest.raises(PersistenceError) as exc_info:
        store.save()

    assert exc_info.value.operation == "save"


def test_set_setting_updates_and_persists(store, store_path):
    store.set_setting("max_pending_contacts_per_user", "3")
    store.set_setting("new_key", "value")

    reloaded = JsonStore(store_path, {}).open()
    assert reloaded.get_int_setting("max_pending_contacts_per_user", 10) == 3
    assert reloaded.get_setting("new_key") == "value"


def test_non_integer_setting_uses_default(store):
    store.set_setting("credits_per_approval", "lots")

    assert store.get_int_setting("credits_per_approval", 1) == 1


def test_generate_id_is_lowercase_base36():
    ids = {generate_id() for _ in range(200)}

    assert len(ids) == 200
    for value in ids:
        assert value.isalnum()
        assert value == value.lower()


def test_close_without_changes_writes_nothing(store_path):
    store = JsonStore(store_path, DEFAULT_SETTINGS).open()
    store.close()

    assert not store_path.exists()
    assert not store.is_open


def test_close_retries_failed_save(store_path, tmp_path, add_user, store):
    add_user("u1")
    store.path = tmp_path
    with pytest.raises(PersistenceError):
        store.save()
    assert store.is_dirty

    store.path = store_path
    store.close()

    assert not store.is_dirty
    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert [u["id"] for u in data["users"]] == ["u1"]


def test_health_check_reports_counts(store, add_user):
    add_user("u1")

    health = store.health_check()

    assert health["healthy"] is True
    assert health["users"] == 1
    assert health["contacts"] == 0
