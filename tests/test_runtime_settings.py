"""Tests for the runtime settings store and its admin endpoints."""

from chatdesk.db.models import SETTINGS
from chatdesk.runtime_settings import store
from chatdesk.runtime_settings.schemas import API_KEY_MASK

URL = "/api/v1/admin/settings"


def _stored(fake_db) -> dict:
    return {row["name"]: row["value"] for row in fake_db.rows(SETTINGS)}


# --- store ---

def test_set_value_inserts_then_updates(fake_db):
    store.set_value(store.SYSTEM_PROMPT, "Be brief.")
    store.set_value(store.SYSTEM_PROMPT, "Be thorough.")
    assert len(fake_db.rows(SETTINGS)) == 1
    assert store.get_value(store.SYSTEM_PROMPT) == "Be thorough."


def test_typed_accessors_fall_back_to_defaults(fake_db):
    assert store.get_int(store.MAX_CHATS_PER_USER) == 10
    assert store.get_bool(store.ALLOW_REGISTRATIONS) is True
    assert store.get_bool(store.MAINTENANCE_MODE) is False
    assert store.get_system_prompt() == store.DEFAULT_SYSTEM_PROMPT

    store.set_value(store.MAX_MESSAGES_PER_CHAT, "lots")
    assert store.get_int(store.MAX_MESSAGES_PER_CHAT) == 50


def test_empty_value_counts_as_missing(fake_db):
    store.set_value(store.SYSTEM_PROMPT, "")
    assert store.get_value(store.SYSTEM_PROMPT) is None
    assert store.get_system_prompt() == store.DEFAULT_SYSTEM_PROMPT


def test_sync_defaults_keeps_existing_values(fake_db, settings):
    store.set_value(store.MAX_CHATS_PER_USER, "3")
    store.set_value(store.LLM_API_KEY, "stale-key")

    touched = store.sync_defaults()

    values = _stored(fake_db)
    assert values[store.MAX_CHATS_PER_USER] == "3"
    assert values[store.MAINTENANCE_MODE] == "false"
    assert values[store.LLM_API_KEY] == settings.GROQ_API_KEY
    assert store.LLM_API_KEY in touched
    assert len(fake_db.rows(SETTINGS)) == len(store.DEFAULTS) + 1


def test_sync_without_env_key(fake_db, settings, monkeypatch):
    monkeypatch.setattr(settings, "GROQ_API_KEY", "")
    touched = store.sync_defaults()
    assert store.LLM_API_KEY not in touched
    assert store.LLM_API_KEY not in _stored(fake_db)


def test_resolve_llm_api_key(fake_db, settings, monkeypatch):
    assert store.resolve_llm_api_key() == settings.GROQ_API_KEY
    store.set_value(store.LLM_API_KEY, "from-table")
    assert store.resolve_llm_api_key() == "from-table"

    fake_db.tables[SETTINGS] = []
    monkeypatch.setattr(settings, "GROQ_API_KEY", "")
    assert store.resolve_llm_api_key() is None


# --- endpoints ---

def test_settings_require_admin(client, auth_header):
    assert client.get(URL, headers=auth_header).status_code == 403
    assert client.post(URL, json={"settings": {}}, headers=auth_header).status_code == 403
    assert client.post(f"{URL}/sync", headers=auth_header).status_code == 403


def test_get_settings_masks_api_key(client, admin_header):
    client.post(f"{URL}/sync", headers=admin_header)

    resp = client.get(URL, headers=admin_header)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["api_key"] == API_KEY_MASK
    assert data["max_messages_per_chat"] == 50
    assert data["max_chats_per_user"] == 10
    assert data["maintenance_mode"] is False
    assert data["allow_registrations"] is True
    assert data["system_prompt"] == store.DEFAULT_SYSTEM_PROMPT


def test_get_settings_without_key(client, admin_header):
    data = client.get(URL, headers=admin_header).json()["data"]
    assert data["api_key"] == ""


def test_save_settings(client, admin_header, fake_db):
    resp = client.post(
        URL,
        json={"settings": {"max_chats_per_user": 3, "maintenance_mode": True, "system_prompt": "Be kind.", "colour": "red"}},
        headers=admin_header,
    )
    assert resp.status_code == 200
    assert sorted(resp.json()["data"]["updated"]) == ["maintenance_mode", "max_chats_per_user", "system_prompt"]

    values = _stored(fake_db)
    assert values["max_chats_per_user"] == "3"
    assert values["maintenance_mode"] == "true"
    assert "colour" not in values


def test_save_skips_masked_api_key(client, admin_header, fake_db):
    store.set_value(store.LLM_API_KEY, "real-key")

    resp = client.post(URL, json={"settings": {"api_key": API_KEY_MASK}}, headers=admin_header)
    assert resp.json()["data"]["updated"] == []
    assert _stored(fake_db)[store.LLM_API_KEY] == "real-key"

    client.post(URL, json={"settings": {"api_key": "new-key"}}, headers=admin_header)
    assert _stored(fake_db)[store.LLM_API_KEY] == "new-key"


def test_save_rejects_invalid_format(client, admin_header):
    resp = client.post(URL, json={"settings": "everything"}, headers=admin_header)
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid settings format"

    resp = client.post(URL, json={}, headers=admin_header)
    assert resp.status_code == 400


def test_sync_endpoint(client, admin_header, fake_db):
    resp = client.post(f"{URL}/sync", headers=admin_header)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["message"] == "Settings synchronized"
    assert store.ALLOW_REGISTRATIONS in data["settings"]
    assert _stored(fake_db)[store.ALLOW_REGISTRATIONS] == "true"
