"""
Tests for the HTTP endpoints.
"""
from datachat.core.config import settings


def _upload(client, content=b"name,age\nAlice,30\nBob,25", filename="people.csv"):
    return client.post("/api/v1/datasets/upload", files={"file": (filename, content, "text/plain")})


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["language_model"] is True


class TestDatasetEndpoints:
    """Upload, list, detail, preview."""

    def test_upload(self, client):
        response = _upload(client)

        assert response.status_code == 200
        body = response.json()
        assert body["dataset"]["schema"] == {"name": "text", "age": "integer"}
        assert body["dataset"]["row_count"] == 2
        assert body["preview"] == [{"name": "Alice", "age": 30}, {"name": "Bob", "age": 25}]

    def test_upload_unsupported_type(self, client):
        response = _upload(client, b"x", "sheet.xlsx")
        assert response.status_code == 400

    def test_upload_bad_json(self, client):
        response = _upload(client, b'{"a": 1}', "bad.json")
        assert response.status_code == 400

    def test_upload_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 8)
        response = _upload(client)
        assert response.status_code == 413

    def test_list_newest_first(self, client):
        first = _upload(client).json()["dataset"]["id"]
        second = _upload(client, b'[{"a":1}]', "a.json").json()["dataset"]["id"]

        body = client.get("/api/v1/datasets/").json()
        assert body["total"] == 2
        assert [d["id"] for d in body["datasets"]] == [second, first]

    def test_detail(self, client):
        dataset_id = _upload(client).json()["dataset"]["id"]

        response = client.get(f"/api/v1/datasets/{dataset_id}")
        assert response.status_code == 200
        assert response.json()["original_filename"] == "people.csv"
        assert client.get("/api/v1/datasets/404").status_code == 404

    def test_preview(self, client):
        content = "\n".join(["n"] + [str(i) for i in range(150)]).encode()
        dataset_id = _upload(client, content, "n.csv").json()["dataset"]["id"]

        small = client.get(f"/api/v1/datasets/{dataset_id}/preview?rows=5").json()
        assert small["columns"] == ["n"]
        assert [r["n"] for r in small["preview_data"]] == [0, 1, 2, 3, 4]
        assert small["total_rows"] == 150

        capped = client.get(f"/api/v1/datasets/{dataset_id}/preview?rows=500").json()
        assert len(capped["preview_data"]) == settings.MAX_PREVIEW_ROWS

    def test_preview_unknown_dataset(self, client):
        assert client.get("/api/v1/datasets/7/preview").status_code == 404


class TestChatEndpoints:
    """Ask and chat history."""

    def test_ask(self, client):
        dataset_id = _upload(client).json()["dataset"]["id"]

        response = client.post(f"/api/v1/datasets/{dataset_id}/ask", json={"question": "How many?"})

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "system"
        assert body["generated_query"] == "SELECT COUNT(*) FROM table_name"
        assert body["result_rows"] == [{"count": 2}]
        assert body["chart_spec"]["kind"] == "bar"

    def test_ask_without_question(self, client):
        dataset_id = _upload(client).json()["dataset"]["id"]

        assert client.post(f"/api/v1/datasets/{dataset_id}/ask", json={}).status_code == 400
        assert client.post(f"/api/v1/datasets/{dataset_id}/ask", json={"question": " "}).status_code == 400

    def test_ask_unknown_dataset(self, client):
        response = client.post("/api/v1/datasets/42/ask", json={"question": "Hi"})
        assert response.status_code == 404

    def test_chat_history(self, client):
        dataset_id = _upload(client).json()["dataset"]["id"]
        client.post(f"/api/v1/datasets/{dataset_id}/ask", json={"question": "How many?"})

        body = client.get(f"/api/v1/datasets/{dataset_id}/chat").json()

        assert body["total"] == 2
        assert [m["role"] for m in body["messages"]] == ["user", "system"]
        assert body["messages"][0]["content"] == "How many?"

    def test_chat_unknown_dataset(self, client):
        assert client.get("/api/v1/datasets/3/chat").status_code == 404
