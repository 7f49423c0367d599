from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import get_registry
from markup.languages import ALL_LANGUAGES, LanguageRegistry

registry = LanguageRegistry()


def override_get_registry():
    return registry


app.dependency_overrides[get_registry] = override_get_registry
client = TestClient(app)


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestRender:
    def test_render(self):
        response = client.post("/v1/render", json={"text": "**hi** __there__"})
        assert response.status_code == 200
        html = response.json()["html"]
        assert "<strong>hi</strong>" in html
        assert "<u>there</u>" in html

    def test_render_with_now(self):
        response = client.post(
            "/v1/render",
            json={"text": "<t:1700000000:R>", "now": 1700000000},
        )
        assert response.status_code == 200
        assert ">now</span>" in response.json()["html"]

    def test_render_with_timezone(self):
        response = client.post(
            "/v1/render",
            json={"text": "<t:1700000000:t>", "timezone": "Asia/Tokyo"},
        )
        assert response.status_code == 200
        assert "7:13 AM" in response.json()["html"]

    def test_render_invalid_timezone(self):
        response = client.post(
            "/v1/render", json={"text": "x", "timezone": "Moon/Base"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "error"
        assert body["error"]["type"] == "invalid_timezone_error"

    def test_render_directory_timezone(self):
        response = client.post("/v1/render", json={"text": "x", "timezone": "America"})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_timezone_error"

    def test_render_overlong_timestamp(self):
        text = "<t:" + "1" * 5000 + ">"
        response = client.post("/v1/render", json={"text": text})
        assert response.status_code == 200
        assert "discord-timestamp" not in response.json()["html"]

    def test_render_highlights_with_registry(self):
        response = client.post(
            "/v1/render", json={"text": "```python\nimport os\n```"}
        )
        assert 'class="language-python"' in response.json()["html"]

    def test_render_strips_script(self):
        response = client.post(
            "/v1/render", json={"text": "<script>alert(1)</script>"}
        )
        assert "<script" not in response.json()["html"]


class TestFormat:
    def test_bold(self):
        response = client.post(
            "/v1/format",
            json={"action": "bold", "text": "hello world", "start": 0, "end": 5},
        )
        assert response.status_code == 200
        assert response.json() == {
            "text": "**hello** world",
            "selection": {"start": 2, "end": 7},
        }

    def test_reversed_selection(self):
        response = client.post(
            "/v1/format",
            json={"action": "italic", "text": "hello world", "start": 5, "end": 0},
        )
        assert response.json()["text"] == "*hello* world"

    def test_link_with_url(self):
        response = client.post(
            "/v1/format",
            json={
                "action": "link",
                "text": "docs",
                "start": 0,
                "end": 4,
                "url": "https://example.com",
            },
        )
        assert response.json()["text"] == "[docs](https://example.com)"

    def test_link_empty_url_uses_placeholder(self):
        response = client.post(
            "/v1/format",
            json={"action": "link", "text": "docs", "start": 0, "end": 4, "url": ""},
        )
        data = response.json()
        assert data["text"] == "[docs](url)"
        assert data["selection"] == {"start": 7, "end": 10}

    def test_timestamp(self):
        response = client.post(
            "/v1/format",
            json={
                "action": "timestamp",
                "text": "at ",
                "start": 3,
                "end": 3,
                "epoch": 1700000000,
                "style": "R",
            },
        )
        assert response.json()["text"] == "at <t:1700000000:R>"

    def test_timestamp_requires_epoch(self):
        response = client.post(
            "/v1/format",
            json={"action": "timestamp", "text": "", "start": 0, "end": 0},
        )
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_request_error"

    def test_unknown_action(self):
        response = client.post(
            "/v1/format",
            json={"action": "blink", "text": "x", "start": 0, "end": 1},
        )
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "unknown_action_error"

    def test_negative_offsets_rejected(self):
        response = client.post(
            "/v1/format",
            json={"action": "bold", "text": "x", "start": -1, "end": 1},
        )
        assert response.status_code == 422


class TestTimestamp:
    def test_relative(self):
        response = client.post(
            "/v1/timestamp",
            json={"epoch": 1700000000, "style": "R", "now": 1700000060},
        )
        assert response.status_code == 200
        assert response.json() == {
            "token": "<t:1700000000:R>",
            "preview": "1 minute ago",
            "style": "R",
        }

    def test_default_style(self):
        response = client.post(
            "/v1/timestamp", json={"epoch": 1700000000, "timezone": "UTC"}
        )
        data = response.json()
        assert data["token"] == "<t:1700000000>"
        assert data["style"] == "f"
        assert data["preview"] == "November 14, 2023 10:13 PM"

    def test_invalid_timezone(self):
        response = client.post(
            "/v1/timestamp", json={"epoch": 1, "timezone": "Nope/Nope"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_timezone_error"


class TestLanguages:
    def test_list(self):
        response = client.get("/v1/languages")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == len(ALL_LANGUAGES)
        python = next(item for item in data if item["id"] == "python")
        assert python == {
            "id": "python",
            "name": "Python",
            "aliases": ["py"],
            "loaded": True,
        }

    def test_load_by_alias(self):
        response = client.post("/v1/languages/rs/load")
        assert response.status_code == 200
        assert response.json() == {"id": "rust", "loaded": True}
        assert registry.is_loaded("rust")

    def test_load_unknown(self):
        response = client.post("/v1/languages/klingon/load")
        assert response.status_code == 200
        assert response.json() == {"id": "klingon", "loaded": False}
