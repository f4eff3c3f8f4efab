from __future__ import annotations


class TestViewerPage:
    def test_index_injects_ws_port(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"8765" in resp.data

    def test_index_html_alias(self, client):
        assert client.get("/index.html").status_code == 200

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.get_json() == {"status": "ok"}


class TestDocumentAssets:
    def test_404_without_document(self, client):
        assert client.get("/doc/site.css").status_code == 404

    def test_serves_files_beside_document(self, client, coordinator, html_file):
        coordinator.load_document(html_file)
        resp = client.get("/doc/site.css")
        assert resp.status_code == 200
        assert b"color: red" in resp.data
        resp.close()
