import json

import httpx
import pytest

from conftest import CHAPTER_TEXT, text_completion, tool_call_completion
from studypack.schemas.preferences import PreferencesUpdate
from studypack.schemas.studypack import StudyPackData
from studypack.utils.error_handler import PackNotFound

ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


class TestPackStore:
    def test_round_trip(self, stores, sample_pack):
        pack_store, _ = stores
        data = StudyPackData.model_validate(sample_pack)

        saved = pack_store.create("alice", data)
        loaded = pack_store.get("alice", saved.id)

        assert loaded == saved
        assert loaded.to_pack_data() == data
        assert loaded.to_pack_data().model_dump(exclude_none=True) == sample_pack

    def test_round_trip_without_optional_sections(self, stores, sample_pack):
        pack_store, _ = stores
        del sample_pack["important_questions"]
        data = StudyPackData.model_validate(sample_pack)

        saved = pack_store.create("alice", data)

        assert pack_store.get("alice", saved.id).important_questions is None

    def test_list_newest_first_and_scoped(self, stores, sample_pack):
        pack_store, _ = stores
        data = StudyPackData.model_validate(sample_pack)

        first = pack_store.create("alice", data)
        second = pack_store.create("alice", data)
        pack_store.create("bob", data)

        listed = pack_store.list("alice")
        assert {p.id for p in listed} == {first.id, second.id}
        assert listed[0].created_at >= listed[1].created_at
        assert len(pack_store.list("bob")) == 1
        assert pack_store.list("carol") == []

    def test_list_skips_unreadable_files(self, stores, sample_pack, tmp_path):
        pack_store, _ = stores
        saved = pack_store.create("alice", StudyPackData.model_validate(sample_pack))

        user_dir = tmp_path / "packs" / "alice"
        (user_dir / "truncated.json").write_text('{"id": "x", "user_', encoding="utf-8")
        (user_dir / "hand-edited.json").write_text(
            json.dumps({"id": "y", "user_id": "alice", "created_at": "yesterday"}),
            encoding="utf-8",
        )
        (user_dir / "not-a-row.json").write_text("[]", encoding="utf-8")

        assert [p.id for p in pack_store.list("alice")] == [saved.id]

    def test_other_user_cannot_read(self, stores, sample_pack):
        pack_store, _ = stores
        saved = pack_store.create("alice", StudyPackData.model_validate(sample_pack))

        with pytest.raises(PackNotFound):
            pack_store.get("bob", saved.id)

    def test_delete_is_soft_no_op(self, stores, sample_pack):
        pack_store, _ = stores
        saved = pack_store.create("alice", StudyPackData.model_validate(sample_pack))

        assert pack_store.delete("bob", saved.id) is False
        assert pack_store.delete("alice", "does-not-exist") is False
        assert pack_store.delete("alice", "../../etc/passwd") is False
        assert pack_store.get("alice", saved.id).id == saved.id

        assert pack_store.delete("alice", saved.id) is True
        assert pack_store.delete("alice", saved.id) is False
        assert pack_store.list("alice") == []

    def test_preferences_defaults_and_merge(self, stores):
        _, preference_store = stores

        assert preference_store.get("alice").model_dump() == {
            "theme": "default", "font": "Inter", "shape": "default",
        }

        preference_store.update("alice", PreferencesUpdate(theme="ocean"))
        updated = preference_store.update("alice", PreferencesUpdate(shape="rounded"))

        assert updated.model_dump() == {"theme": "ocean", "font": "Inter", "shape": "rounded"}
        assert preference_store.get("alice") == updated
        assert preference_store.get("bob").theme == "default"


class TestPackEndpoints:
    def test_requires_identity(self, client):
        response = client.get("/packs")
        assert response.status_code == 401
        assert "X-User-Id" in response.json()["error"]

    def test_save_list_get_delete(self, client, sample_pack):
        created = client.post("/packs", json=sample_pack, headers=ALICE)
        assert created.status_code == 201
        pack_id = created.json()["id"]
        assert created.json()["user_id"] == "alice"

        listed = client.get("/packs", headers=ALICE).json()
        assert [p["id"] for p in listed] == [pack_id]
        assert client.get("/packs", headers=BOB).json() == []

        fetched = client.get(f"/packs/{pack_id}", headers=ALICE).json()
        assert fetched["quiz"] == sample_pack["quiz"]
        assert fetched["meta"] == sample_pack["meta"]

        assert client.get(f"/packs/{pack_id}", headers=BOB).status_code == 404

        assert client.delete(f"/packs/{pack_id}", headers=BOB).json() == {"deleted": False}
        assert client.delete(f"/packs/{pack_id}", headers=ALICE).json() == {"deleted": True}
        assert client.delete(f"/packs/{pack_id}", headers=ALICE).json() == {"deleted": False}
        assert client.get("/packs", headers=ALICE).json() == []

    def test_save_rejects_invalid_pack(self, client, sample_pack):
        sample_pack["quiz"]["questions"][0]["difficulty"] = "impossible"
        response = client.post("/packs", json=sample_pack, headers=ALICE)
        assert response.status_code == 400

    def test_generate_and_save(self, client, gateway, api_key, sample_pack):
        gateway.respond_json(tool_call_completion(json.dumps(sample_pack)))

        response = client.post("/packs/generate", headers=ALICE, json={
            "grade": "8",
            "subject": "Biology",
            "chapterTitle": "Photosynthesis",
            "chapterText": CHAPTER_TEXT,
        })

        assert response.status_code == 201
        pack_id = response.json()["id"]
        assert client.get(f"/packs/{pack_id}", headers=ALICE).json()["flashcards"] == sample_pack["flashcards"]

    def test_generate_uses_extracted_pdf_text(self, client, gateway, api_key, sample_pack):
        pdf_text = "Extracted from the PDF: " + "light reactions and the Calvin cycle. " * 3
        responses = iter([
            text_completion(pdf_text),
            tool_call_completion(json.dumps(sample_pack)),
        ])
        gateway.response = lambda request: httpx.Response(200, json=next(responses))

        response = client.post("/packs/generate", headers=ALICE, json={
            "grade": "8",
            "subject": "Biology",
            "chapterTitle": "Photosynthesis",
            "pdfBase64": "JVBERi0x",
        })

        assert response.status_code == 201
        assert len(gateway.requests) == 2
        assert pdf_text in gateway.last_json()["messages"][1]["content"]

    def test_generate_falls_back_when_extraction_fails(self, client, gateway, api_key, sample_pack):
        responses = iter([
            text_completion("too short"),
            tool_call_completion(json.dumps(sample_pack)),
        ])
        gateway.response = lambda request: httpx.Response(200, json=next(responses))

        response = client.post("/packs/generate", headers=ALICE, json={
            "grade": "8",
            "subject": "Biology",
            "chapterTitle": "Photosynthesis",
            "chapterText": CHAPTER_TEXT,
            "pdfBase64": "JVBERi0x",
        })

        assert response.status_code == 201
        assert CHAPTER_TEXT in gateway.last_json()["messages"][1]["content"]

    def test_generate_with_nothing_usable(self, client, gateway, api_key):
        gateway.respond_json(text_completion("short"))

        response = client.post("/packs/generate", headers=ALICE, json={
            "grade": "8",
            "subject": "Biology",
            "chapterTitle": "Photosynthesis",
            "pdfBase64": "JVBERi0x",
        })

        assert response.status_code == 400
        assert client.get("/packs", headers=ALICE).json() == []


class TestPreferenceEndpoints:
    def test_get_and_update(self, client):
        assert client.get("/preferences", headers=ALICE).json()["theme"] == "default"

        response = client.put("/preferences", headers=ALICE, json={"theme": "rose", "font": "Quicksand"})

        assert response.status_code == 200
        assert response.json() == {"theme": "rose", "font": "Quicksand", "shape": "default"}
        assert client.get("/preferences", headers=ALICE).json()["font"] == "Quicksand"

    @pytest.mark.parametrize("body", [
        {"theme": "neon"},
        {"font": "Comic Sans"},
        {"shape": "circle"},
        {"colour": "blue"},
    ])
    def test_rejects_values_outside_allowed_sets(self, client, body):
        response = client.put("/preferences", headers=ALICE, json=body)
        assert response.status_code == 400
        assert client.get("/preferences", headers=ALICE).json()["theme"] == "default"
