"""Integration tests for publishing API routes."""

from unittest.mock import patch

import pytest

from app import app

POST = "#+TITLE: Hello\n#+DATE: <2020-05-01 Fri 10:30>\n#+CATEGORIES: tech life\n#+LAYOUT: post\n"
PAGE = "#+TITLE: About\n#+DATE: <2020-05-01 Fri>\n#+CATEGORIES: misc\n#+LAYOUT: default\n"
INVALID = "#+LAYOUT: post\n#+TITLE: No categories or date\n"


@pytest.fixture()
def client(tmp_path):
    """Flask test client with settings pointing at a temp source and site tree."""
    source = tmp_path / "org"
    source.mkdir()
    (source / "hello.org").write_text(POST)
    (source / "about.org").write_text(PAGE)
    (source / "invalid.org").write_text(INVALID)
    (source / "note.org").write_text("Plain note.\n")

    settings = {
        "source_dir": str(source),
        "posts_dir": str(tmp_path / "site" / "_posts"),
        "pages_dir": str(tmp_path / "site"),
    }
    with patch("routes.publish.load_settings", return_value=settings):
        app.config["TESTING"] = True
        yield tmp_path, app.test_client()


# ---------------------------------------------------------------------------
# POST /api/publish/<path>
# ---------------------------------------------------------------------------


def test_publish_post(client):
    tmp_path, c = client
    resp = c.post("/api/publish/hello.org")
    assert resp.status_code == 200
    assert resp.get_json() == {"path": "hello.org", "message": "Post 'hello.org' published!"}
    assert (tmp_path / "site" / "_posts" / "2020-05-01-hello.org").is_file()


def test_publish_page(client):
    tmp_path, c = client
    resp = c.post("/api/publish/about.org")
    assert resp.get_json()["message"] == "Page 'about.org' published!"
    assert (tmp_path / "site" / "about.org").is_file()


def test_publish_invalid_reports_missing_headers(client):
    tmp_path, c = client
    resp = c.post("/api/publish/invalid.org")
    assert resp.status_code == 200
    message = resp.get_json()["message"]
    assert "'#+CATEGORIES'" in message
    assert message.endswith("Publication skipped")
    assert not (tmp_path / "site").exists()


def test_publish_not_an_article(client):
    _, c = client
    resp = c.post("/api/publish/note.org")
    assert resp.get_json()["message"] == "'note.org' is not an article, publication skipped!"


def test_publish_missing_file(client):
    _, c = client
    resp = c.post("/api/publish/nope.org")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Bulk publishing
# ---------------------------------------------------------------------------


def test_publish_all_posts(client):
    tmp_path, c = client
    resp = c.post("/api/publish/posts")
    assert resp.status_code == 200
    data = resp.get_json()
    # invalid.org also declares the post layout
    assert data["published"] == 1
    assert data["failed"] == 1
    by_path = {r["path"]: r for r in data["results"]}
    assert by_path["hello.org"]["ok"] is True
    assert by_path["invalid.org"]["ok"] is False
    assert (tmp_path / "site" / "_posts" / "2020-05-01-hello.org").is_file()


def test_publish_all_pages(client):
    _, c = client
    data = c.post("/api/publish/pages").get_json()
    assert data["published"] == 1
    assert data["results"][0]["message"] == "Page 'about.org' published!"


# ---------------------------------------------------------------------------
# Metadata preview / article listing
# ---------------------------------------------------------------------------


def test_metadata_preview(client):
    _, c = client
    resp = c.get("/api/metadata/hello.org")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["metadata"]["categories"] == "[tech,life]"
    assert data["metadata"]["date"] == "2020-05-01 10:30"
    assert data["front_matter"].startswith("---\ntitle: Hello\n")
    assert data["front_matter"].endswith("---\n\n")


def test_metadata_preview_invalid(client):
    _, c = client
    resp = c.get("/api/metadata/invalid.org")
    assert resp.status_code == 422
    assert "missing required header" in resp.get_json()["error"]


def test_list_articles_defaults_to_posts(client):
    _, c = client
    data = c.get("/api/articles").get_json()
    assert data["layout"] == "post"
    assert data["files"] == ["hello.org", "invalid.org"]


def test_list_articles_by_layout(client):
    _, c = client
    assert c.get("/api/articles?layout=default").get_json()["files"] == ["about.org"]


def test_invalid_settings_return_500(tmp_path):
    with patch("routes.publish.load_settings", return_value={"schema": "nope"}):
        app.config["TESTING"] = True
        resp = app.test_client().post("/api/publish/posts")
    assert resp.status_code == 500
    assert "schema" in resp.get_json()["error"]


# ---------------------------------------------------------------------------
# Unreadable sources
# ---------------------------------------------------------------------------


def test_publish_invalid_utf8_returns_status(client):
    tmp_path, c = client
    (tmp_path / "org" / "bad.org").write_bytes(b"#+LAYOUT: post\n\xff\xfe\n")
    resp = c.post("/api/publish/bad.org")
    assert resp.status_code == 200
    assert resp.get_json()["message"].startswith("Cannot read 'bad.org': ")


def test_metadata_preview_invalid_utf8(client):
    tmp_path, c = client
    (tmp_path / "org" / "bad.org").write_bytes(b"#+LAYOUT: post\n\xff\xfe\n")
    resp = c.get("/api/metadata/bad.org")
    assert resp.status_code == 422
    assert resp.get_json()["error"].startswith("Cannot read 'bad.org': ")
