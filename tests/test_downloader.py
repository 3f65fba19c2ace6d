import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from zentitle_codegen import downloader
from zentitle_codegen.errors import DownloadError

FIXTURES = Path(__file__).parent / "fixtures"


def _response(status_code=200, reason="OK", payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload if payload is not None else {"info": {"version": "2024-01-01"}}
    return response


class TestDownloadSpec:
    @patch("zentitle_codegen.downloader.requests.get")
    def test_success_materializes_scratch_file(self, mock_get):
        mock_get.return_value = _response()

        document = downloader.download_spec("https://example.test/openapi.json", timeout=5)
        try:
            assert document.version == "2024-01-01"
            assert document.source == "https://example.test/openapi.json"
            assert document.temp_file_path.name.startswith("openapi-")
            assert json.loads(document.temp_file_path.read_text()) == document.spec
        finally:
            downloader.cleanup(document.temp_file_path)

        mock_get.assert_called_once_with("https://example.test/openapi.json", timeout=5)

    @patch("zentitle_codegen.downloader.requests.get")
    def test_default_url(self, mock_get):
        mock_get.return_value = _response()
        document = downloader.download_spec()
        downloader.cleanup(document.temp_file_path)
        assert mock_get.call_args[0][0] == downloader.OPENAPI_URL

    @patch("zentitle_codegen.downloader.requests.get")
    def test_missing_version(self, mock_get):
        mock_get.return_value = _response(payload={"paths": {}})
        document = downloader.download_spec()
        downloader.cleanup(document.temp_file_path)
        assert document.version == "unknown"

    @patch("zentitle_codegen.downloader.requests.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = _response(503, "Service Unavailable")

        with pytest.raises(DownloadError) as exc_info:
            downloader.download_spec()

        assert exc_info.value.status_code == 503
        assert str(exc_info.value) == "Failed to download OpenAPI spec: 503 Service Unavailable"

    @patch("zentitle_codegen.downloader.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(DownloadError) as exc_info:
            downloader.download_spec()

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    @patch("zentitle_codegen.downloader.requests.get")
    def test_invalid_json(self, mock_get):
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = response

        with pytest.raises(DownloadError, match="not JSON"):
            downloader.download_spec()


class TestLoadSpec:
    @patch("zentitle_codegen.downloader.requests.get")
    def test_local_file_skips_network(self, mock_get):
        document = downloader.load_spec(str(FIXTURES / "zentitle-openapi.json"))
        downloader.cleanup(document.temp_file_path)

        mock_get.assert_not_called()
        assert document.version == "2024-01-01"
        assert "/api/v1/customers" in document.spec["paths"]

    def test_yaml_with_unquoted_date(self, tmp_path):
        spec_file = tmp_path / "spec.yaml"
        spec_file.write_text("openapi: 3.0.0\ninfo:\n  version: 2024-05-01\npaths: {}\n")

        document = downloader.load_spec(str(spec_file))
        scratch = json.loads(document.temp_file_path.read_text())
        downloader.cleanup(document.temp_file_path)

        assert document.version == "2024-05-01"
        assert scratch["info"]["version"] == "2024-05-01"

    @patch("zentitle_codegen.downloader.requests.get")
    def test_url_is_downloaded(self, mock_get):
        mock_get.return_value = _response()
        document = downloader.load_spec("https://example.test/openapi.json")
        downloader.cleanup(document.temp_file_path)
        mock_get.assert_called_once()


class TestCleanup:
    def test_removes_file(self, tmp_path):
        f = tmp_path / "openapi-1.json"
        f.write_text("{}")
        downloader.cleanup(f)
        assert not f.exists()

    def test_missing_file_never_raises(self, tmp_path):
        downloader.cleanup(tmp_path / "gone.json")


class TestSpecVersion:
    def test_version(self):
        assert downloader.spec_version({"info": {"version": "2024-01-01"}}) == "2024-01-01"

    def test_malformed_info(self):
        assert downloader.spec_version({"info": "oops"}) == "unknown"
