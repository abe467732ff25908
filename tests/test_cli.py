"""Tests for the CLI entry points."""

import json

from click.testing import CliRunner

from store_app_importer.cli.main import cli


def write_apps(tmp_path, apps):
    path = tmp_path / "apps.json"
    path.write_text(json.dumps(apps))
    return str(path)


class TestCLI:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Store App Importer" in result.output

    def test_import_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["import", "--help"])
        assert result.exit_code == 0
        assert "--apps" in result.output
        assert "--secrets-file" in result.output
        assert "--settle-delay" in result.output
        assert "--report" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


class TestValidate:
    def test_valid_file(self, tmp_path):
        apps = write_apps(
            tmp_path,
            {
                "apps": [
                    {
                        "packageIdentifier": "Publisher.App",
                        "isFeatured": True,
                        "assignments": [{"targetType": "group", "groupId": "G1", "intent": "required"}],
                    },
                    {"packageIdentifier": "Other.App"},
                ]
            },
        )
        result = CliRunner().invoke(cli, ["validate", "--apps", apps])
        assert result.exit_code == 0
        assert "Publisher.App featured=True assignments=[group:required (G1)]" in result.output
        assert "2 application(s) valid." in result.output

    def test_invalid_entry(self, tmp_path):
        apps = write_apps(tmp_path, [{"isFeatured": True}])
        result = CliRunner().invoke(cli, ["validate", "--apps", apps])
        assert result.exit_code == 1
        assert "InvalidInput" in result.output

    def test_not_json(self, tmp_path):
        path = tmp_path / "apps.json"
        path.write_text("not json")
        result = CliRunner().invoke(cli, ["validate", "--apps", str(path)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestImportCredentials:
    def test_missing_credentials(self, tmp_path, monkeypatch):
        for var in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET"):
            monkeypatch.delenv(var, raising=False)
        apps = write_apps(tmp_path, [{"packageIdentifier": "Publisher.App"}])

        result = CliRunner().invoke(cli, ["import", "--apps", apps])
        assert result.exit_code == 2
        assert "Missing credentials" in result.output

    def test_secrets_file_must_be_object(self, tmp_path, monkeypatch):
        for var in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET"):
            monkeypatch.delenv(var, raising=False)
        apps = write_apps(tmp_path, [{"packageIdentifier": "Publisher.App"}])
        secrets = tmp_path / "secrets.json"
        secrets.write_text(json.dumps(["tenant", "client", "secret"]))

        result = CliRunner().invoke(cli, ["import", "--apps", apps, "--secrets-file", str(secrets)])
        assert result.exit_code == 1
        assert "must contain a JSON object" in result.output
        assert not isinstance(result.exception, AttributeError)
