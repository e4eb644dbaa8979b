import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from swagger_gen.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliToFile:
    def test_generator_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["tofile", "api_fixtures:create_generator", "v1"])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["info"]["title"] == "Cart API"
        assert sorted(document["paths"]) == ["/carts", "/carts/{cart_id}", "/carts/{cart_id}/items"]

    def test_provider_with_config_to_yaml_file(self, tmp_path):
        output_file = tmp_path / "swagger.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "tofile", "api_fixtures:routes", "v1",
            "--config", str(FIXTURES / "swagger-gen.yaml"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0, result.output
        assert "written to" in result.output
        document = yaml.safe_load(output_file.read_text(encoding="utf-8"))
        assert document["servers"] == [{"url": "https://api.example.com/shop"}]
        assert document["security"] == [{"oauth2": ["carts.read"]}]
        assert "api_fixtures.Cart" in document["components"]["schemas"]
        cart_id = document["paths"]["/carts/{cart_id}"]["get"]["parameters"][0]
        assert cart_id["name"] == "cartId"

    def test_host_basepath_and_schemes(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "tofile", "api_fixtures:create_generator", "v1",
            "--host", "localhost:5000", "--basepath", "/api",
            "--scheme", "http", "--scheme", "https",
            "--format", "json",
        ])

        assert result.exit_code == 0, result.output
        servers = json.loads(result.output)["servers"]
        assert [s["url"] for s in servers] == ["http://localhost:5000/api", "https://localhost:5000/api"]

    def test_format_option_overrides_suffix(self, tmp_path):
        output_file = tmp_path / "swagger.out"
        runner = CliRunner()
        result = runner.invoke(main, [
            "tofile", "api_fixtures:create_generator", "v1", "-o", str(output_file), "--format", "yaml",
        ])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(output_file.read_text(encoding="utf-8"))["openapi"] == "3.0.1"

    def test_unknown_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["tofile", "api_fixtures:create_generator", "v9"])

        assert result.exit_code == 1
        assert 'Unknown Swagger document - "v9"' in result.output

    def test_bad_provider_reference(self):
        runner = CliRunner()
        result = runner.invoke(main, ["tofile", "api_fixtures", "v1"])

        assert result.exit_code == 2
        assert "module:attribute" in result.output

    def test_missing_attribute(self):
        runner = CliRunner()
        result = runner.invoke(main, ["tofile", "api_fixtures:nothing_here", "v1"])

        assert result.exit_code == 1
        assert "has no attribute" in result.output

    def test_provider_that_is_not_usable(self):
        runner = CliRunner()
        result = runner.invoke(main, ["tofile", "api_fixtures:__name__", "v1"])

        assert result.exit_code == 1
        assert "neither a SwaggerGenerator" in result.output


class TestCliListDocs:
    def test_lists_generator_documents(self):
        runner = CliRunner()
        result = runner.invoke(main, ["list-docs", "api_fixtures:create_generator"])

        assert result.exit_code == 0
        assert result.output.split() == ["v1"]

    def test_lists_config_documents(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "list-docs", "api_fixtures:routes", "--config", str(FIXTURES / "swagger-gen.yaml"),
        ])

        assert result.exit_code == 0
        assert result.output.split() == ["v1", "v2"]

    def test_no_documents(self):
        runner = CliRunner()
        result = runner.invoke(main, ["list-docs", "api_fixtures:routes"])

        assert result.exit_code == 0
        assert "No documents configured" in result.output
