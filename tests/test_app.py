import json
import logging

import pytest

import app as app_module
from countries import CountryStore
from rules.challenge import Challenge
from rules.predicates import PredicateKind


SAHEL_CHALLENGE = Challenge(
    kind=PredicateKind.EXACT_LENGTH,
    parameter=4,
    answers=("Chad", "Mali", "Togo"),
    description="3 countries contain exactly 4 letters.",
)


@pytest.fixture
def sahel_store(tmp_path):
    path = tmp_path / "countryData.json"
    path.write_text(
        json.dumps({"Chad": {"isLandlocked": True}, "Mali": {"isLandlocked": True}, "Togo": {}}),
        encoding="utf-8",
    )
    store = CountryStore()
    store.load(path=path)
    return store


@pytest.fixture
def client(monkeypatch, sahel_store):
    monkeypatch.setattr(app_module, "country_store", sahel_store)
    app_module.app.config.update(TESTING=True, WTF_CSRF_ENABLED=False)
    with app_module.app.test_client() as c:
        yield c


def current_round(client):
    with client.session_transaction() as sess:
        return sess.get("round")


def test_index_renders(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Generate Today's Challenge" in resp.data


def test_new_challenge_stays_in_band(client):
    resp = client.post("/challenge")
    assert resp.status_code == 302

    state = current_round(client)
    assert state is not None
    assert 2 <= len(state["remaining"]) <= 3
    assert set(state["remaining"]) <= {"Chad", "Mali", "Togo"}


def test_guess_flow(client, monkeypatch):
    monkeypatch.setattr(app_module, "generate_challenge", lambda *a, **kw: SAHEL_CHALLENGE)
    client.post("/challenge")

    page = client.get("/")
    assert b"3 countries contain exactly 4 letters." in page.data

    client.post("/guess", data={"guess": "Chad"})
    state = current_round(client)
    assert state["remaining"] == ["Mali", "Togo"]
    assert state["correct_count"] == 1
    assert b"Correct Answer: Countries remaining = 2" in client.get("/").data

    client.post("/guess", data={"guess": "Spain"})
    state = current_round(client)
    assert state["remaining"] == ["Mali", "Togo"]
    assert state["correct_count"] == 1
    assert b"Incorrect Answer: Countries remaining = 2" in client.get("/").data

    client.post("/guess", data={"guess": " Mali "})
    client.post("/guess", data={"guess": "Togo"})
    state = current_round(client)
    assert state["remaining"] == []
    assert b"You found them all!" in client.get("/").data


def test_guess_before_challenge_is_harmless(client):
    resp = client.post("/guess", data={"guess": "Chad"})
    assert resp.status_code == 302
    assert current_round(client) is None


def test_exhausted_generation_shows_message(client, monkeypatch):
    monkeypatch.setattr(app_module, "generate_challenge", lambda *a, **kw: None)
    client.post("/challenge")
    assert current_round(client) is None
    assert b"No challenge available" in client.get("/").data


def test_unloaded_data_blocks_generation(client, monkeypatch):
    monkeypatch.setattr(app_module, "country_store", CountryStore())
    client.post("/challenge")
    assert current_round(client) is None

    page = client.get("/").data
    assert b"Country data is unavailable" in page
    assert b"No challenge available" in page


def test_reset_clears_round(client, monkeypatch):
    monkeypatch.setattr(app_module, "generate_challenge", lambda *a, **kw: SAHEL_CHALLENGE)
    client.post("/challenge")
    client.get("/reset")
    assert current_round(client) is None


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "data_ready": True}


def test_startup_load_failure_is_logged(monkeypatch, tmp_path, caplog):
    store = CountryStore()
    monkeypatch.setattr(app_module, "country_store", store)
    monkeypatch.setattr(app_module, "COUNTRY_DATA_URL", None)
    monkeypatch.setattr(app_module, "COUNTRY_DATA_PATH", str(tmp_path / "missing.json"))

    with caplog.at_level(logging.WARNING):
        app_module.load_country_data()

    assert "Country data load failed" in caplog.text
    assert not store.ready


def test_startup_load_reads_configured_path(monkeypatch, tmp_path):
    path = tmp_path / "countryData.json"
    path.write_text(json.dumps({"Chad": {}, "Mali": {}}), encoding="utf-8")
    store = CountryStore()
    monkeypatch.setattr(app_module, "country_store", store)
    monkeypatch.setattr(app_module, "COUNTRY_DATA_URL", None)
    monkeypatch.setattr(app_module, "COUNTRY_DATA_PATH", str(path))

    app_module.load_country_data()

    assert store.ready
    assert list(store.countries) == ["Chad", "Mali"]


def test_settings_reach_the_generator(client, monkeypatch, sahel_store):
    calls = []

    def spy(countries, **kwargs):
        calls.append((countries, kwargs))
        return SAHEL_CHALLENGE

    monkeypatch.setattr(app_module, "generate_challenge", spy)
    monkeypatch.setattr(app_module, "LETTER_MATCH_CASE_SENSITIVE", True)
    monkeypatch.setattr(app_module, "ALLOW_REPEAT_FILTER", False)
    monkeypatch.setattr(app_module, "MAX_CHALLENGE_ATTEMPTS", 7)

    client.post("/challenge")

    assert len(calls) == 1
    countries, kwargs = calls[0]
    assert countries is sahel_store.countries
    assert kwargs == {"max_attempts": 7, "case_sensitive": True, "allow_repeat_filter": False}


def test_int_setting_falls_back_on_bad_values():
    assert app_module.int_setting("25", 100) == 25
    assert app_module.int_setting(None, 100) == 100
    assert app_module.int_setting("lots", 100) == 100
    assert app_module.int_setting("0", 100) == 100
    assert app_module.int_setting("-3", 100) == 100
