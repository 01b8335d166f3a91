from datetime import timedelta

OWNER = {"x-dev-user-email": "owner@example.com"}
FAN = {"x-dev-user-email": "fan@example.com"}


def test_save_and_upsert_submission(client, make_prompt, uploaded_image):
    prompt = make_prompt()
    image_url = uploaded_image("owner@example.com")

    first = client.post(
        "/v1/submissions",
        headers=OWNER,
        json={"promptId": prompt.id, "wordIndex": 2, "title": "Puddle", "imageUrl": image_url},
    )
    assert first.status_code == 200
    assert first.json()["imageUrl"] == image_url
    assert first.json()["wordIndex"] == 2

    second = client.post(
        "/v1/submissions",
        headers=OWNER,
        json={"promptId": prompt.id, "wordIndex": 2, "title": "", "text": "<p>rain on glass</p>"},
    )
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["title"] is None
    assert second.json()["imageUrl"] is None
    assert second.json()["text"] == "<p>rain on glass</p>"


def test_submission_validation(client, make_prompt, uploaded_image):
    prompt = make_prompt()
    other_users_image = uploaded_image("someone-else@example.com")

    cases = [
        ({"promptId": prompt.id, "wordIndex": 4, "text": "hi"}, 400),
        ({"promptId": prompt.id, "wordIndex": 1}, 400),
        ({"promptId": prompt.id, "wordIndex": 1, "text": "<p> </p>"}, 400),
        ({"promptId": prompt.id, "wordIndex": 1, "imageUrl": other_users_image}, 400),
        ({"promptId": prompt.id, "wordIndex": 1, "imageUrl": "https://elsewhere.test/a.png"}, 400),
        ({"promptId": "missing", "wordIndex": 1, "text": "hi"}, 404),
    ]
    for body, expected in cases:
        resp = client.post("/v1/submissions", headers=OWNER, json=body)
        assert resp.status_code == expected, body


def test_submissions_only_accepted_for_current_prompt(client, make_prompt):
    past = make_prompt(start_offset=timedelta(days=-30))
    future = make_prompt(start_offset=timedelta(days=30))

    for prompt in (past, future):
        resp = client.post(
            "/v1/submissions",
            headers=OWNER,
            json={"promptId": prompt.id, "wordIndex": 1, "text": "late"},
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Prompt is not open for submissions"


def test_submission_detail_includes_owner_prompt_and_favorites(client, make_prompt, user_id):
    prompt = make_prompt(words=("salt", "wire", "bloom"))
    owner_id = user_id("owner@example.com")
    client.put("/v1/profile", headers=OWNER, json={"bio": "<p>hi</p>", "website": "https://owner.example"})

    created = client.post(
        "/v1/submissions",
        headers=OWNER,
        json={"promptId": prompt.id, "wordIndex": 3, "text": "petals"},
    ).json()
    client.post("/v1/favorites", headers=FAN, json={"submissionId": created["id"]})

    resp = client.get(f"/v1/submissions/{created['id']}")
    assert resp.status_code == 200
    submission = resp.json()["submission"]
    assert submission["user"]["id"] == owner_id
    assert submission["user"]["website"] == "https://owner.example"
    assert submission["prompt"]["word3"] == "bloom"
    assert "weekStart" in submission["prompt"]
    assert submission["favoriteCount"] == 1

    assert client.get("/v1/submissions/nope").status_code == 404


def test_delete_submission_removes_image(client, storage, make_prompt, uploaded_image):
    prompt = make_prompt()
    image_url = uploaded_image("owner@example.com")
    created = client.post(
        "/v1/submissions",
        headers=OWNER,
        json={"promptId": prompt.id, "wordIndex": 1, "imageUrl": image_url},
    ).json()

    assert client.delete(f"/v1/submissions/{created['id']}", headers=FAN).status_code == 404

    resp = client.delete(f"/v1/submissions/{created['id']}", headers=OWNER)
    assert resp.status_code == 200
    assert storage.objects == {}
    assert client.get(f"/v1/submissions/{created['id']}").status_code == 404


def test_clear_all_for_prompt(client, storage, make_prompt, uploaded_image):
    prompt = make_prompt()
    for index in (1, 2):
        client.post(
            "/v1/submissions",
            headers=OWNER,
            json={"promptId": prompt.id, "wordIndex": index, "imageUrl": uploaded_image("owner@example.com")},
        )
    client.post("/v1/submissions", headers=OWNER, json={"promptId": prompt.id, "wordIndex": 3, "text": "words"})
    client.post("/v1/submissions", headers=FAN, json={"promptId": prompt.id, "wordIndex": 1, "text": "mine"})

    resp = client.delete("/v1/submissions", headers=OWNER, params={"promptId": prompt.id})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "deleted": 3}
    assert storage.objects == {}

    gallery = client.get(f"/v1/prompts/{prompt.id}/submissions").json()
    assert [item["text"] for item in gallery] == ["mine"]


def test_favorites_toggle_and_feed(client, make_prompt):
    prompt = make_prompt()
    ids = []
    for index in (1, 2):
        resp = client.post(
            "/v1/submissions",
            headers=OWNER,
            json={"promptId": prompt.id, "wordIndex": index, "text": f"entry {index}"},
        )
        ids.append(resp.json()["id"])

    assert client.post("/v1/favorites", headers=FAN, json={"submissionId": ids[0]}).json() == {"favorited": True}
    assert client.post("/v1/favorites", headers=FAN, json={"submissionId": ids[1]}).json() == {"favorited": True}
    assert client.post("/v1/favorites", headers=FAN, json={"submissionId": ids[0]}).json() == {"favorited": False}

    feed = client.get("/v1/favorites", headers=FAN)
    assert feed.status_code == 200
    assert [item["id"] for item in feed.json()] == [ids[1]]
    assert feed.json()[0]["favoriteCount"] == 1

    assert client.post("/v1/favorites", headers=FAN, json={"submissionId": "missing"}).status_code == 404
    assert client.get("/v1/favorites").status_code == 401


def test_current_prompt_and_gallery(client, make_prompt):
    assert client.get("/v1/prompts/current").json() == {"prompt": None}

    make_prompt(words=("old", "b", "c"), start_offset=timedelta(days=-30))
    current = make_prompt(words=("now", "b", "c"))

    resp = client.get("/v1/prompts/current")
    assert resp.status_code == 200
    assert resp.json()["prompt"]["id"] == current.id
    assert resp.json()["prompt"]["status"] == "current"

    for index in (1, 2, 3):
        client.post(
            "/v1/submissions",
            headers=OWNER,
            json={"promptId": current.id, "wordIndex": index, "text": f"t{index}"},
        )
    gallery = client.get(f"/v1/prompts/{current.id}/submissions", params={"limit": 2})
    assert gallery.status_code == 200
    assert len(gallery.json()) == 2
    assert gallery.json()[0]["user"]["name"] == "owner"

    assert client.get("/v1/prompts/missing").status_code == 404
