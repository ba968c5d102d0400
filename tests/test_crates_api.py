# coding: utf-8

import json

from factories import DEFAULT_TARBALL, publish_body


def _publish(api, user_id="alice", **kwargs):
    return api.client.put(
        "/api/v1/crates/new",
        content=publish_body(**kwargs),
        headers=api.auth(user_id),
    )


def _errors(response):
    body = response.json()
    assert set(body) == {"errors"}
    return [error["detail"] for error in body["errors"]]


def test_config_json(api):
    response = api.client.get("/config.json")

    assert response.status_code == 200
    assert response.json() == {
        "dl": "http://testserver/api/v1/crates",
        "api": "http://testserver",
    }


def test_config_json_advertises_auth_required(private_api):
    response = private_api.client.get("/config.json")

    assert response.json()["auth-required"] is True


def test_publish_and_read_back(api):
    response = _publish(api)

    assert response.status_code == 200
    assert response.json() == {
        "warnings": {"invalid_categories": [], "invalid_badges": [], "other": []}
    }

    crate = api.client.get("/api/v1/crates/testcrate_1")
    assert crate.status_code == 200
    assert crate.json()["max_version"] == "0.1.0"
    assert crate.json()["versions"] == ["0.1.0"]

    version = api.client.get("/api/v1/crates/testcrate_1/0.1.0")
    assert version.status_code == 200
    assert version.json()["published_by"] == "alice"
    assert version.json()["license"] == "MIT"

    download = api.client.get("/api/v1/crates/testcrate_1/0.1.0/download")
    assert download.status_code == 200
    assert download.content == DEFAULT_TARBALL


def test_publish_requires_token(api):
    response = api.client.put("/api/v1/crates/new", content=publish_body())
    assert response.status_code == 401
    assert _errors(response)

    response = api.client.put(
        "/api/v1/crates/new",
        content=publish_body(),
        headers={"Authorization": "not-a-real-token"},
    )
    assert response.status_code == 401


def test_publish_accepts_bearer_prefix(api):
    response = api.client.put(
        "/api/v1/crates/new",
        content=publish_body(),
        headers={"Authorization": f"Bearer {api.keys['alice']}"},
    )

    assert response.status_code == 200


def test_publish_errors(api):
    assert _publish(api).status_code == 200

    duplicate = _publish(api)
    assert duplicate.status_code == 409
    assert "already exists" in _errors(duplicate)[0]

    not_owner = _publish(api, user_id="bob", vers="0.2.0")
    assert not_owner.status_code == 403

    malformed = api.client.put(
        "/api/v1/crates/new",
        content=b"\x00\x01",
        headers=api.auth("alice"),
    )
    assert malformed.status_code == 400
    assert _errors(malformed)


def test_sparse_index_paths(api):
    assert _publish(api, vers="0.1.1").status_code == 200
    assert _publish(api, vers="0.1.2").status_code == 200
    assert _publish(api, name="a").status_code == 200
    assert _publish(api, name="ab").status_code == 200
    assert _publish(api, name="abc").status_code == 200

    response = api.client.get("/te/st/testcrate_1")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    lines = [json.loads(line) for line in response.text.split("\n")]
    assert [line["vers"] for line in lines] == ["0.1.1", "0.1.2"]
    assert lines[0]["deps"][0]["req"] == "^1.0"

    assert api.client.get("/1/a").status_code == 200
    assert api.client.get("/2/ab").status_code == 200
    assert json.loads(api.client.get("/3/a/abc").text)["name"] == "abc"

    missing = api.client.get("/mi/ss/missing_crate")
    assert missing.status_code == 404
    assert _errors(missing)


def test_owners_endpoints(api):
    assert _publish(api).status_code == 200

    listed = api.client.get("/api/v1/crates/testcrate_1/owners")
    assert listed.status_code == 200
    assert listed.json() == {"users": [{"id": "alice", "login": "alice", "name": None}]}

    added = api.client.put(
        "/api/v1/crates/testcrate_1/owners",
        json={"users": ["bob"]},
        headers=api.auth("alice"),
    )
    assert added.status_code == 200
    assert added.json()["ok"] is True

    logins = {user["login"] for user in api.client.get("/api/v1/crates/testcrate_1/owners").json()["users"]}
    assert logins == {"alice", "bob"}

    # bob is now an owner and may publish
    assert _publish(api, user_id="bob", vers="0.2.0").status_code == 200


def test_owners_errors(api):
    assert _publish(api).status_code == 200

    forbidden = api.client.put(
        "/api/v1/crates/testcrate_1/owners",
        json={"users": ["bob"]},
        headers=api.auth("bob"),
    )
    assert forbidden.status_code == 403

    invalid = api.client.put(
        "/api/v1/crates/testcrate_1/owners",
        json={"users": []},
        headers=api.auth("alice"),
    )
    assert invalid.status_code == 400
    assert _errors(invalid)

    missing = api.client.get("/api/v1/crates/never_published/owners")
    assert missing.status_code == 404


def test_yank_and_unyank(api):
    assert _publish(api, vers="0.1.1").status_code == 200
    assert _publish(api, vers="0.1.2").status_code == 200

    yanked = api.client.delete("/api/v1/crates/testcrate_1/0.1.2/yank", headers=api.auth("alice"))
    assert yanked.status_code == 200
    assert yanked.json() == {"ok": True}
    lines = [json.loads(line) for line in api.client.get("/te/st/testcrate_1").text.split("\n")]
    assert [line["yanked"] for line in lines] == [False, True]
    assert api.client.get("/api/v1/crates/testcrate_1").json()["max_version"] == "0.1.1"

    unyanked = api.client.put("/api/v1/crates/testcrate_1/0.1.2/unyank", headers=api.auth("alice"))
    assert unyanked.status_code == 200
    assert api.client.get("/api/v1/crates/testcrate_1/0.1.2").json()["yanked"] is False


def test_yank_errors(api):
    assert _publish(api).status_code == 200

    assert api.client.delete("/api/v1/crates/testcrate_1/0.1.0/yank").status_code == 401
    assert (
        api.client.delete("/api/v1/crates/testcrate_1/0.1.0/yank", headers=api.auth("bob")).status_code
        == 403
    )
    assert (
        api.client.delete("/api/v1/crates/testcrate_1/9.9.9/yank", headers=api.auth("alice")).status_code
        == 404
    )
    assert (
        api.client.delete("/api/v1/crates/never_published/0.1.0/yank", headers=api.auth("alice")).status_code
        == 404
    )


def test_unknown_crate_and_version(api):
    assert api.client.get("/api/v1/crates/never_published").status_code == 404
    assert _publish(api).status_code == 200
    assert api.client.get("/api/v1/crates/testcrate_1/0.9.0").status_code == 404
    assert api.client.get("/api/v1/crates/testcrate_1/0.9.0/download").status_code == 404


def test_token_endpoints(api):
    created = api.client.post("/api/v1/tokens", json={"name": "ci"}, headers=api.auth("alice"))
    assert created.status_code == 201
    key = created.json()["key"]
    token_id = created.json()["token"]["id"]
    assert len(key) == 32

    listed = api.client.get("/api/v1/tokens", headers={"Authorization": key})
    assert listed.status_code == 200
    names = {item["name"] for item in listed.json()["items"]}
    assert names == {"tests", "ci"}
    assert all("key" not in item for item in listed.json()["items"])

    forbidden = api.client.delete(f"/api/v1/tokens/{token_id}", headers=api.auth("bob"))
    assert forbidden.status_code == 403

    deleted = api.client.delete(f"/api/v1/tokens/{token_id}", headers=api.auth("alice"))
    assert deleted.status_code == 200
    assert api.client.get("/api/v1/tokens", headers={"Authorization": key}).status_code == 401
    assert api.client.delete(f"/api/v1/tokens/{token_id}", headers=api.auth("alice")).status_code == 404


def test_token_endpoints_require_auth(api):
    assert api.client.get("/api/v1/tokens").status_code == 401
    assert api.client.post("/api/v1/tokens", json={"name": "x"}).status_code == 401


def test_me_without_frontend(api):
    response = api.client.get("/me", follow_redirects=False)

    assert response.status_code == 404
    assert _errors(response)


def test_private_registry_requires_token_for_reads(private_api):
    assert _publish(private_api).status_code == 200

    assert private_api.client.get("/te/st/testcrate_1").status_code == 401
    assert private_api.client.get("/api/v1/crates/testcrate_1/0.1.0/download").status_code == 401
    assert private_api.client.get("/te/st/testcrate_1", headers=private_api.auth("bob")).status_code == 200
    assert (
        private_api.client.get(
            "/api/v1/crates/testcrate_1/0.1.0/download",
            headers=private_api.auth("bob"),
        ).content
        == DEFAULT_TARBALL
    )

    redirect = private_api.client.get("/me", follow_redirects=False)
    assert redirect.status_code == 307
    assert redirect.headers["location"] == "http://testserver/tokens"
