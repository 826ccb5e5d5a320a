import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from vocab_drill.main import app


@pytest.fixture
def client(no_mongo):
    with TestClient(app) as test_client:
        # deterministic order for the flows below
        test_client.post("/session/shuffle", json={"shuffle": False})
        yield test_client


def _import(client, records):
    response = client.post("/session/import", json={"records": records})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_empty_session_snapshot(client):
    body = client.get("/session").json()
    assert body["current"] is None
    assert body["size"] == 0
    assert body["score"] == {"correct": 0, "total": 0}
    assert body["shuffle"] is False


def test_writing_flow(client, records):
    assert client.post("/session/mode", json={"mode": "writing"}).status_code == 200
    report = _import(client, records + [{"EN": "", "FR": ""}])
    assert report == {"status": "ok", "accepted": 4, "rejected": 1}

    assert client.get("/session").json()["prompt"] == "chat"
    outcome = client.post("/session/answer/writing", json={"text": " CAT "}).json()
    assert outcome["accepted"] is True
    assert outcome["correct"] is True
    assert outcome["advanceAfterMs"] == 800

    snap = client.get("/session").json()
    assert snap["position"] == 0
    assert snap["pendingAdvance"] is True
    assert snap["currentStreak"] == 1

    snap = client.post("/session/advance").json()
    assert snap["position"] == 1
    assert snap["prompt"] == "chien"

    outcome = client.post("/session/answer/writing", json={"text": "dgo"}).json()
    assert outcome["correct"] is False
    assert outcome["expected"] == "dog"
    snap = client.get("/session").json()
    assert snap["mistakes"] == 1
    assert snap["score"] == {"correct": 1, "total": 2}


def test_qcm_flow(client, records):
    client.post("/session/mode", json={"mode": "qcm"})
    _import(client, records)

    options = client.get("/session/options").json()
    assert sorted(options["options"]) == ["bird", "cat", "dog", "fish"]
    assert options["answered"] is False

    outcome = client.post("/session/answer/qcm", json={"option": "dog"}).json()
    assert outcome["correct"] is False
    assert outcome["advanceAfterMs"] == 3500

    locked = client.post("/session/answer/qcm", json={"option": "cat"}).json()
    assert locked["accepted"] is False
    options = client.get("/session/options").json()
    assert options["answered"] is True
    assert options["selected"] == "dog"


def test_flashcard_flow(client, records):
    client.post("/session/mode", json={"mode": "flashcards"})
    _import(client, records)
    assert client.post("/session/reveal").json()["revealed"] is True
    outcome = client.post("/session/answer/flashcard", json={"knew": True}).json()
    assert outcome["correct"] is True
    snap = client.post("/session/advance").json()
    assert snap["revealed"] is False
    assert snap["position"] == 1


def test_mode_mismatch_is_a_conflict(client, records):
    client.post("/session/mode", json={"mode": "writing"})
    _import(client, records)
    assert client.get("/session/options").status_code == 409
    assert client.post("/session/reveal").status_code == 409
    assert client.post("/session/answer/qcm", json={"option": "cat"}).status_code == 409
    assert client.post("/session/answer/flashcard", json={"knew": True}).status_code == 409


def test_unknown_mode_is_rejected(client):
    assert client.post("/session/mode", json={"mode": "matching"}).status_code == 422


def test_csv_import(client):
    response = client.post("/session/import/csv", json={"text": "EN;FR;EG\ncat;chat;\n\ndog;chien;Good dog\n"})
    assert response.json() == {"status": "ok", "accepted": 2, "rejected": 0}
    assert client.get("/session").json()["current"] == {"EN": "cat", "FR": "chat", "EG": ""}


def test_csv_import_without_header_is_bad_request(client):
    response = client.post("/session/import/csv", json={"text": ""})
    assert response.status_code == 400


def test_empty_import_keeps_list(client, records):
    _import(client, records)
    report = _import(client, [{"EN": " ", "FR": ""}])
    assert report["status"] == "empty"
    assert client.get("/session").json()["size"] == 4


def test_scope_and_restart(client, records):
    client.post("/session/mode", json={"mode": "writing"})
    _import(client, records)

    assert client.post("/session/scope", json={"scope": "wrong"}).json()["scope"] == "full"

    client.post("/session/answer/writing", json={"text": "nope"})
    snap = client.post("/session/scope", json={"scope": "wrong"}).json()
    assert snap["scope"] == "wrong"
    assert snap["size"] == 1
    assert snap["fullSize"] == 4

    snap = client.post("/session/restart").json()
    assert snap["scope"] == "wrong"
    snap = client.post("/session/restart", json={"full": True}).json()
    assert snap["scope"] == "full"
    assert snap["size"] == 4


def test_jump_is_clamped(client, records):
    _import(client, records)
    assert client.post("/session/jump", json={"index": 40}).json()["position"] == 3
    assert client.post("/session/jump", json={"index": -2}).json()["position"] == 0


def test_preferences(client):
    prefs = client.get("/preferences").json()
    assert prefs["shuffle"] is False

    updated = client.put("/preferences", json={"mode": "qcm", "theme": "dark"}).json()
    assert updated == {"mode": "qcm", "direction": "FR→EN", "shuffle": False, "theme": "dark"}
    assert client.get("/session").json()["mode"] == "qcm"


def test_folders_need_mongo(client):
    assert client.get("/folders").status_code == 503
    assert client.post("/folders", json={"name": "Unit 1"}).status_code == 503


def test_uploads_go_through_the_loader(client, records):
    from vocab_drill.services.runtime import get_runtime

    loader = get_runtime().loader
    generation = loader.generation
    _import(client, records)
    client.post("/session/import/csv", json={"text": "EN;FR\ncat;chat\n"})
    assert loader.generation == generation + 2


def test_default_list_is_loaded_at_startup(no_mongo, monkeypatch, tmp_path):
    path = tmp_path / "default.csv"
    path.write_text("EN;FR;EG\ncat;chat;\ndog;chien;\n", encoding="utf-8")
    monkeypatch.setenv("DEFAULT_VOCAB_PATH", str(path))
    with TestClient(app) as test_client:
        assert test_client.get("/session").json()["fullSize"] == 2


def test_missing_default_list_does_not_block_startup(no_mongo, monkeypatch, tmp_path):
    monkeypatch.setenv("DEFAULT_VOCAB_PATH", str(tmp_path / "absent.csv"))
    with TestClient(app) as test_client:
        body = test_client.get("/session").json()
        assert body["fullSize"] == 0
        assert body["loading"] is False


class TestFolderLibrary:
    @pytest.fixture
    def library(self, client, fake_db, monkeypatch):
        monkeypatch.setattr("vocab_drill.routes.decks.persistence_enabled", lambda: True)
        return client

    def _folder(self, library, name="Unit 1"):
        response = library.post("/folders", json={"name": name})
        assert response.status_code == 200
        return response.json()["id"]

    def _deck(self, library, folder_id, name, rows):
        response = library.post(f"/folders/{folder_id}/decks", json={"name": name, "records": rows})
        assert response.status_code == 200
        return response.json()

    def test_folder_crud(self, library):
        folder_id = self._folder(library, "  Unit 1 ")
        assert library.get("/folders").json() == [{"id": folder_id, "name": "Unit 1"}]
        self._deck(library, folder_id, "animals", [{"EN": "cat", "FR": "chat"}])

        deleted = library.delete(f"/folders/{folder_id}").json()

        assert deleted == {"deleted": True, "decksDeleted": 1}
        assert library.get("/folders").json() == []

    def test_invalid_and_unknown_ids(self, library):
        assert library.get("/folders/not-an-id/decks").status_code == 400
        assert library.get(f"/folders/{ObjectId()}/decks").status_code == 404
        folder_id = self._folder(library)
        assert library.get(f"/folders/{folder_id}/decks/nope").status_code == 400
        assert library.get(f"/folders/{folder_id}/decks/{ObjectId()}").status_code == 404
        assert library.delete(f"/folders/{folder_id}/decks/{ObjectId()}").status_code == 404

    def test_deck_without_valid_rows_is_rejected(self, library):
        folder_id = self._folder(library)
        response = library.post(
            f"/folders/{folder_id}/decks", json={"name": "blank", "records": [{"EN": " ", "FR": ""}]}
        )
        assert response.status_code == 400

    def test_save_get_and_delete_deck(self, library):
        folder_id = self._folder(library)
        meta = self._deck(
            library, folder_id, "animals", [{"en": "cat", "fr": "chat"}, {"EN": "", "FR": ""}, {"EN": "dog"}]
        )
        assert meta["rowCount"] == 2

        assert [d["id"] for d in library.get(f"/folders/{folder_id}/decks").json()] == [meta["id"]]
        deck = library.get(f"/folders/{folder_id}/decks/{meta['id']}").json()
        assert deck["data"] == [{"EN": "cat", "FR": "chat", "EG": ""}, {"EN": "dog", "FR": "", "EG": ""}]

        assert library.delete(f"/folders/{folder_id}/decks/{meta['id']}").json() == {"deleted": True}
        assert library.get(f"/folders/{folder_id}/decks").json() == []

    def test_load_concatenates_decks_into_session(self, library):
        folder_id = self._folder(library)
        first = self._deck(library, folder_id, "one", [{"EN": "cat", "FR": "chat"}])
        second = self._deck(library, folder_id, "two", [{"EN": "dog", "FR": "chien"}, {"EN": "fish", "FR": "poisson"}])

        result = library.post(
            f"/folders/{folder_id}/decks/load", json={"deckIds": [second["id"], first["id"]]}
        ).json()

        assert result["status"] == "ok"
        assert result["report"]["accepted"] == 3
        snap = library.get("/session").json()
        assert snap["fullSize"] == 3
        assert snap["current"]["EN"] == "dog"

    def test_load_of_empty_decks_keeps_current_list(self, library, fake_db, records):
        _import(library, records)
        folder_id = self._folder(library)
        user_key = fake_db.folders.docs[0]["userKey"]
        empty_id = ObjectId()
        fake_db.decks.docs.append(
            {"_id": empty_id, "userKey": user_key, "folderId": ObjectId(folder_id), "name": "empty", "rowCount": 0, "data": []}
        )

        result = library.post(f"/folders/{folder_id}/decks/load", json={"deckIds": [str(empty_id)]}).json()

        assert result["status"] == "empty"
        assert library.get("/session").json()["fullSize"] == 4

    def test_load_rejects_invalid_deck_id(self, library):
        folder_id = self._folder(library)
        response = library.post(f"/folders/{folder_id}/decks/load", json={"deckIds": ["bad"]})
        assert response.status_code == 400
