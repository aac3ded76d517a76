from __future__ import annotations


def _commit_words(client, group: str, text: str) -> list[dict]:
    staged = client.post(f"/api/groups/{group}/stage", json={"text": text})
    assert staged.status_code == 200
    commit = client.post(f"/api/groups/{group}/commit")
    assert commit.status_code == 200
    return commit.json()["created"]


def test_api_stage_commit_and_pool_flow(client):
    staged = client.post("/api/groups/vocabulary/stage", json={"text": "cat, dog  dog"})
    assert staged.json()["staged"] == ["cat", "dog"]
    assert client.get("/api/pool").json()["total"] == 0

    commit = client.post("/api/groups/vocabulary/commit")
    assert commit.status_code == 200
    created = commit.json()["created"]
    assert [item["text"] for item in created] == ["cat", "dog"]
    assert created[0]["activities"] == ["vocabulary"]

    pool = client.get("/api/pool").json()
    assert pool["total"] == 2
    assert pool["items"][1] == {"id": 2, "text": "dog", "activities": ["vocabulary"], "group": "vocabulary"}


def test_api_toggle_rejection_is_not_an_http_error(client):
    response = client.post("/api/groups/vocabulary/toggles", json={"activity": "vocabulary", "enabled": False})

    assert response.status_code == 200
    payload = response.json()
    assert payload["accepted"] is False
    assert payload["state"]["vocabulary"] is True
    assert payload["reason"]


def test_api_toggle_updates_group_members(client):
    _commit_words(client, "spelling", "light night")

    response = client.post("/api/groups/spelling/toggles", json={"activity": "phonics", "enabled": True})

    payload = response.json()
    assert payload["accepted"] is True
    assert all(item["activities"] == ["spelling", "phonics"] for item in payload["pool"])


def test_api_unknown_group_is_bad_request(client):
    response = client.post("/api/groups/grammar/stage", json={"text": "word"})
    assert response.status_code == 400


def test_api_move_and_delete_word(client):
    created = _commit_words(client, "vocabulary", "river")
    word_id = created[0]["id"]

    moved = client.post(f"/api/words/{word_id}/move", json={"target_group": "phonics"})
    assert moved.json()["word"]["activities"] == ["phonics"]
    missing = client.post("/api/words/999/move", json={"target_group": "phonics"})
    assert missing.json()["moved"] is False

    assert client.delete(f"/api/words/{word_id}").json()["removed"] is True
    assert client.delete(f"/api/words/{word_id}").json()["removed"] is False


def test_api_file_upload_stages_into_file_group(client):
    response = client.post(
        "/api/groups/file-vocabulary/stage/file",
        files={"file": ("week1.txt", b"apple\nbanana apple", "text/plain")},
    )
    assert response.status_code == 200
    assert response.json()["staged"] == ["apple", "banana"]

    rejected = client.post(
        "/api/groups/file-vocabulary/stage/file",
        files={"file": ("week1.pdf", b"%PDF", "application/pdf")},
    )
    assert rejected.status_code == 400

    commit = client.post("/api/channels/file/commit")
    assert [item["group"] for item in commit.json()["created"]] == ["file-vocabulary", "file-vocabulary"]


def test_api_unstage_token(client):
    client.post("/api/groups/phonics/stage", json={"text": "ship shop"})

    response = client.delete("/api/groups/phonics/stage/ship")

    assert response.json()["removed"] is True
    assert response.json()["staged"] == ["shop"]


def test_api_distribute_counts(client):
    response = client.get("/api/schedule/distribute", params={"words": 10, "days": 5})
    assert response.json()["counts"] == [4, 3, 2, 1, 0]

    invalid = client.get("/api/schedule/distribute", params={"words": 10, "days": 11})
    assert invalid.status_code == 400


def test_api_schedule_build_and_move(client):
    _commit_words(client, "vocabulary", "one two three four five six seven eight nine ten")

    built = client.post("/api/schedule", json={"days": 5})
    assert built.status_code == 200
    assert [len(day["new_word_ids"]) for day in built.json()["days"]] == [4, 3, 2, 1, 0]

    rejected = client.post("/api/schedule/move", json={"word_id": 1, "from_day": 1, "to_day": 5})
    assert rejected.status_code == 200
    assert rejected.json()["accepted"] is False
    assert rejected.json()["reason"]

    accepted = client.post("/api/schedule/move", json={"word_id": 1, "from_day": 1, "to_day": 2})
    assert accepted.json()["accepted"] is True
    current = client.get("/api/schedule").json()
    assert 1 in current["days"][1]["new_word_ids"]
    assert 1 not in current["days"][1]["review_word_ids"]


def test_api_schedule_missing_and_empty_pool(client):
    assert client.get("/api/schedule").status_code == 404
    assert client.post("/api/schedule", json={"days": 3}).status_code == 400
    assert client.post("/api/schedule/move", json={"word_id": 1, "from_day": 1, "to_day": 2}).status_code == 400


def test_api_lesson_export_and_restore(client):
    _commit_words(client, "spelling", "sun moon")
    client.post("/api/schedule", json={"days": 3})

    exported = client.get("/api/lesson").json()["lesson"]
    assert [word["text"] for word in exported["words"]] == ["sun", "moon"]
    assert len(exported["groups"]) == 6
    assert len(exported["schedule"]) == 3

    client.delete("/api/words/1")
    restored = client.put("/api/lesson", json=exported)
    assert restored.status_code == 200
    assert restored.json()["lesson"] == exported

    exported["groups"][0]["vocabulary"] = False
    broken = client.put("/api/lesson", json=exported)
    assert broken.status_code == 400


def test_api_move_staged_token_between_file_groups(client):
    client.post(
        "/api/groups/file-vocabulary/stage/file",
        files={"file": ("words.txt", b"apple banana", "text/plain")},
    )

    response = client.post("/api/groups/file-vocabulary/stage/apple/move", json={"target_group": "file-spelling"})

    assert response.status_code == 200
    assert response.json()["moved"] is True
    assert response.json()["staged"] == {"file-vocabulary": ["banana"], "file-spelling": ["apple"]}

    manual = client.post("/api/groups/file-vocabulary/stage/banana/move", json={"target_group": "spelling"})
    assert manual.status_code == 400
