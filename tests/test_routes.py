import pytest
from fastapi.testclient import TestClient

from trailerflow.configs import settings
from trailerflow.extractors.base import ExtractorError
from trailerflow.extractors.imdb import ImdbTrailerExtractor
from trailerflow.main import app
from trailerflow.utils.proxy_utils import create_m3u8_proxy_url, set_m3u8_proxy_url
from trailerflow.utils.http_utils import DownloadError


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_extract(monkeypatch):
    def _install(result=None, error=None):
        async def extract(self, url, **kwargs):
            if error is not None:
                raise error
            return {"destination_url": result, "request_headers": {}, "proxy_endpoint": self.proxy_endpoint}

        monkeypatch.setattr(ImdbTrailerExtractor, "extract", extract)

    return _install


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_generate_url(client):
    set_m3u8_proxy_url("/api/proxy")
    response = client.post(
        "/generate_url",
        json={"destination_url": "http://x/a.m3u8", "request_headers": {"Referer": "https://a/"}},
    )
    assert response.status_code == 200
    assert response.json()["url"] == create_m3u8_proxy_url("http://x/a.m3u8", headers={"Referer": "https://a/"})


def test_generate_url_for_target_with_local_proxy(client):
    response = client.post("/generate_url", json={"destination_url": "http://x/a.m3u8", "features": {"requires": []}})
    assert response.json()["url"] == "http://x/a.m3u8"


def test_trailer(client, fake_extract):
    set_m3u8_proxy_url("/api/proxy")
    fake_extract(result="https://imdb-video.example/720.mp4")

    response = client.get("/extractor/trailer", params={"imdb_id": "tt0111161", "proxy": "true"})

    assert response.status_code == 200
    body = response.json()
    assert body["destination_url"] == "https://imdb-video.example/720.mp4"
    assert body["proxy_url"] == create_m3u8_proxy_url("https://imdb-video.example/720.mp4")
    assert "proxy_endpoint" not in body


@pytest.mark.parametrize("error", [ExtractorError("IMDb: no player state"), DownloadError(404, "Not Found")])
def test_trailer_not_available(client, fake_extract, error):
    fake_extract(error=error)
    response = client.get("/extractor/trailer", params={"imdb_id": "tt0111161"})
    assert response.status_code == 404
    assert response.json()["detail"] == "No trailer available"


def test_proxy_stream(client):
    set_m3u8_proxy_url("/api/proxy")
    stream = {"type": "hls", "id": "s1", "playlist": "http://x/a.m3u8", "flags": ["cors-allowed"], "headers": {"Referer": "https://a/"}}

    body = client.post("/proxy/stream", json={"stream": stream}).json()

    assert body["proxied"] is True
    assert body["stream"]["playlist"] == create_m3u8_proxy_url("http://x/a.m3u8", headers={"Referer": "https://a/"})
    assert body["stream"]["headers"] == {}
    assert body["stream"]["flags"] == ["cors-allowed"]


def test_proxy_stream_left_alone_when_not_needed(client):
    stream = {"type": "file", "qualities": {"720": {"type": "mp4", "url": "https://cdn/720.mp4"}}, "flags": ["cors-allowed"]}
    body = client.post("/proxy/stream", json={"stream": stream}).json()
    assert body["proxied"] is False
    assert body["stream"]["qualities"]["720"]["url"] == "https://cdn/720.mp4"


def test_rewrite_and_decode(client):
    set_m3u8_proxy_url("https://new.example/api/proxy")
    proxy_url = create_m3u8_proxy_url("http://x/a.m3u8", headers={"Referer": "https://a/"})
    legacy = proxy_url.replace("https://new.example/api/proxy", "https://old.example/m3u8-proxy")

    assert client.get("/proxy/rewrite", params={"url": legacy}).json() == {"url": proxy_url}
    assert client.get("/proxy/decode", params={"url": proxy_url}).json() == {
        "url": "http://x/a.m3u8",
        "headers": {"Referer": "https://a/"},
    }
    assert client.get("/proxy/decode", params={"url": "https://cdn/a.m3u8"}).status_code == 400


def test_proxy_config(client):
    assert client.post("/proxy/config", json={"m3u8_proxy_url": "https://p.example/proxy"}).json() == {
        "m3u8_proxy_url": "https://p.example/proxy"
    }
    assert client.get("/proxy/config").json() == {"m3u8_proxy_url": "https://p.example/proxy"}
    assert client.post("/proxy/config", json={"m3u8_proxy_url": ""}).status_code == 422


def test_api_password(client, monkeypatch):
    monkeypatch.setattr(settings, "api_password", "secret")
    assert client.get("/proxy/config").status_code == 403
    assert client.get("/proxy/config", params={"api_password": "secret"}).status_code == 200
    assert client.get("/proxy/config", headers={"api_password": "secret"}).status_code == 200
