import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from zentitle_codegen.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
SPEC_FILE = str(FIXTURES / "zentitle-openapi.json")


class TestCliGenerate:
    def test_generate_from_local_file(self, tmp_path):
        output_dir = tmp_path / "node"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "--openapi-path", SPEC_FILE,
            "-o", str(output_dir),
            "--version-file", str(tmp_path / "api-version.json"),
        ])

        assert result.exit_code == 0, result.output
        assert "Generated 3 resources (10 files) from API version 2024-01-01" in result.output
        assert (output_dir / "resources" / "handlers" / "customer-handler.ts").exists()

    def test_generate_with_product_preset(self, tmp_path):
        output_dir = tmp_path / "node"
        version_file = tmp_path / "api-version.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "--product", "zentitle",
            "--openapi-path", SPEC_FILE,
            "-o", str(output_dir),
            "--version-file", str(version_file),
        ])

        assert result.exit_code == 0, result.output
        assert "Filtering to GET methods only" in result.output
        assert "Including tags: Zentitle" in result.output
        assert "Generated 2 resources" in result.output
        assert not (output_dir / "properties" / "subscription-properties.ts").exists()
        info = json.loads(version_file.read_text())
        assert "NalpeironZentitle2" in info["components"]

    def test_generate_filters(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "--openapi-path", SPEC_FILE,
            "-o", str(tmp_path / "node"),
            "--version-file", str(tmp_path / "api-version.json"),
            "--include-tags", "Zentitle",
            "--exclude-resources", "entitlement",
            "--get-only",
        ])

        assert result.exit_code == 0, result.output
        assert "Excluding resources: entitlement" in result.output
        assert "Generated 1 resources" in result.output

    @patch("zentitle_codegen.downloader.requests.get")
    def test_download_failure_exits_non_zero(self, mock_get, tmp_path):
        response = MagicMock(ok=False, status_code=500, reason="Internal Server Error")
        mock_get.return_value = response

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "-o", str(tmp_path / "node"),
            "--version-file", str(tmp_path / "api-version.json"),
        ])

        assert result.exit_code != 0
        assert "Failed to download OpenAPI spec: 500 Internal Server Error" in result.output
        assert not (tmp_path / "node").exists()

    @patch("zentitle_codegen.cli.OpenApiGenerator")
    def test_options_passed_to_generator(self, MockGen, tmp_path):
        MockGen.return_value.generate.return_value = MagicMock(resources=[], files_written=[], api_version="1")

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "--product", "zengain",
            "--openapi-path", "https://example.test/openapi.json",
            "--timeout", "5",
        ])

        assert result.exit_code == 0, result.output
        kwargs = MockGen.call_args.kwargs
        assert kwargs["output_dir"] == Path("nodes/Nalpeiron/Zengain")
        assert kwargs["openapi_url"] == "https://example.test/openapi.json"
        assert kwargs["component_name"] == "NalpeironZengain"
        assert kwargs["node_display_name"] == "Nalpeiron Zengain"
        assert kwargs["timeout"] == 5.0
        assert kwargs["config"].include_only_tags == ["Zengain"]


class TestCliWebhooks:
    def test_webhooks(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "webhooks",
            "--openapi-path", SPEC_FILE,
            "-o", str(tmp_path / "trigger"),
            "--version-file", str(tmp_path / "api-version.json"),
        ])

        assert result.exit_code == 0, result.output
        assert "Generated 3 webhook events" in result.output
        assert (tmp_path / "trigger" / "webhooks" / "events.ts").exists()


class TestCliInfo:
    def test_info_without_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["info", "--version-file", str(tmp_path / "missing.json")])
        assert result.exit_code != 0
        assert "No version information found" in result.output

    def test_info_after_generate(self, tmp_path):
        version_file = tmp_path / "api-version.json"
        runner = CliRunner()
        runner.invoke(main, [
            "generate",
            "--openapi-path", SPEC_FILE,
            "-o", str(tmp_path / "node"),
            "--version-file", str(version_file),
        ])

        result = runner.invoke(main, ["info", "--version-file", str(version_file)])
        assert result.exit_code == 0
        assert json.loads(result.output)["apiSource"]["version"] == "2024-01-01"
