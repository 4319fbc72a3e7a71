import pytest
from fastapi.testclient import TestClient

from conftest import ARTICLE_URL, NONCE, SLIDESHOW_URL, FakeSession
from slideshow_viewer.config import Settings
from slideshow_viewer.models import SlideshowMetadata
from slideshow_viewer.stores.memory import InMemoryProjectStore
from slideshow_viewer.web import app as web


@pytest.fixture
def store():
    return InMemoryProjectStore()


@pytest.fixture
def client(session, store):
    web.app.dependency_overrides[web.get_settings] = lambda: Settings()
    web.app.dependency_overrides[web.get_store] = lambda: store
    web.app.dependency_overrides[web.get_session] = lambda: session
    yield TestClient(web.app)
    web.app.dependency_overrides.clear()


def test_parse_slideshow_success(client, store):
    response = client.post("/api/parse-slideshow", json={"url": ARTICLE_URL})
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"] == {
        "articleId": "1002775",
        "nonce": NONCE,
        "title": "Gallery of Casa Example / Studio",
        "thumbnail": "http://x/b.jpg",
    }
    assert body["images"][0] == {
        "url_large": "http://x/a.jpg",
        "url_medium": "http://x/b.jpg",
        "image_alt": "Alt",
        "caption": "Cap & more",
    }
    assert store.get("1002775") is not None


@pytest.mark.parametrize(
    "body",
    [
        "{}",
        '{"url": ""}',
        '{"url": 5}',
        '["x"]',
        '"abc"',
        "{not json",
        "",
    ],
)
def test_parse_slideshow_missing_url(client, body):
    response = client.post(
        "/api/parse-slideshow",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "URL is required"}


def test_parse_slideshow_single_segment_url(client, session):
    response = client.post(
        "/api/parse-slideshow", json={"url": "https://www.archdaily.com/1002775"}
    )
    assert response.status_code == 400
    assert session.calls == []


def test_parse_slideshow_nonce_not_found(client, session):
    session.pages[ARTICLE_URL] = "<html></html>"
    response = client.post("/api/parse-slideshow", json={"url": ARTICLE_URL})
    assert response.status_code == 404
    assert "error" in response.json()


def test_parse_slideshow_attribute_not_found(client, session):
    session.pages[SLIDESHOW_URL] = "<html></html>"
    response = client.post("/api/parse-slideshow", json={"url": SLIDESHOW_URL})
    assert response.status_code == 404
    assert response.json() == {"error": "data-images attribute not found in HTML"}


def test_parse_slideshow_fetch_error(client):
    response = client.post(
        "/api/parse-slideshow", json={"url": "https://www.archdaily.com/1/2/3"}
    )
    assert response.status_code == 500


def test_parse_slideshow_malformed(client, session):
    session.pages[SLIDESHOW_URL] = '\ndata-images="[{oops"\n'
    response = client.post("/api/parse-slideshow", json={"url": SLIDESHOW_URL})
    assert response.status_code == 500


def test_parse_slideshow_unexpected_error(client, session):
    session.pages[SLIDESHOW_URL] = RuntimeError("boom")
    response = client.post("/api/parse-slideshow", json={"url": SLIDESHOW_URL})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to parse slideshow data"}


def test_projects_endpoints(client, store):
    for i in range(3):
        store.upsert(
            SlideshowMetadata(article_id=str(i), nonce="ab", title=f"T{i}", thumbnail=""),
            viewed_at=i,
        )

    recents = client.get("/api/projects/recents", params={"limit": 2, "offset": 1}).json()
    assert [p["articleId"] for p in recents] == ["1", "0"]

    assert client.get("/api/projects/1/favorite").json() == {
        "articleId": "1",
        "isFavorite": False,
    }
    assert client.post("/api/projects/1/favorite").json()["isFavorite"] is True
    assert client.get("/api/projects/1/favorite").json()["isFavorite"] is True

    favorites = client.get("/api/projects/favorites").json()
    assert [p["articleId"] for p in favorites] == ["1"]
    assert favorites[0]["isFavorite"] is True


def test_recents_rejects_negative_offset(client):
    assert client.get("/api/projects/recents", params={"offset": -1}).status_code == 422


def test_share(client):
    body = client.get(f"/share/1002775-{NONCE}").json()
    assert body == {"articleId": "1002775", "nonce": NONCE, "url": SLIDESHOW_URL}


def test_share_bad_token(client):
    response = client.get("/share/1002775")
    assert response.status_code == 400
    assert "error" in response.json()


def test_home_preloads_shared_slideshow(client):
    response = client.get("/", params={"s": f"1002775-{NONCE}"})
    assert response.status_code == 200
    assert SLIDESHOW_URL in response.text


def test_home_ignores_bad_token(client):
    response = client.get("/", params={"s": "garbage"})
    assert response.status_code == 200
    assert "Slideshow Viewer" in response.text


def test_parse_slideshow_surrogate_entity_stays_encoded(client, session, store):
    session.pages[SLIDESHOW_URL] = (
        '\ndata-images="[{&quot;url_large&quot;:&quot;http://x/a.jpg&quot;,'
        '&quot;caption&quot;:&quot;x&#55357;y&quot;}]"\n'
    )
    response = client.post("/api/parse-slideshow", json={"url": SLIDESHOW_URL})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json()["images"][0]["caption"] == "x&#55357;y"
    assert store.get("1002775") is not None


def test_parse_slideshow_scheme_less_url(client, session):
    response = client.post(
        "/api/parse-slideshow", json={"url": "www.archdaily.com/1002775/casa-example-studio"}
    )
    assert response.status_code == 200
    assert response.json()["metadata"]["articleId"] == "1002775"
    assert session.calls == [ARTICLE_URL, SLIDESHOW_URL]
