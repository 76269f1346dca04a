from click.testing import CliRunner
from sqlalchemy import inspect

from family_tree import cli, config, sessions
from family_tree.db import Database


def test_create_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    result = CliRunner().invoke(cli.cli, ["create-tables", "--database-url", url])
    assert result.exit_code == 0, result.output

    database = Database(url)
    assert set(inspect(database.engine).get_table_names()) >= {
        "users", "family_trees", "members"}
    database.dispose()


def test_create_tables_without_database(monkeypatch):
    monkeypatch.setattr(config, "DATABASE_URL", None)
    result = CliRunner().invoke(cli.cli, ["create-tables"])
    assert result.exit_code != 0
    assert "not configured" in result.output


def test_generate_token(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", "cli-secret-that-is-at-least-32-bytes")
    result = CliRunner().invoke(cli.cli, ["generate-token", "--user-id", "u42",
                                          "--email", "joe@bloggs.com"])
    assert result.exit_code == 0, result.output
    claims = sessions.decode(result.stdout.strip(), "cli-secret-that-is-at-least-32-bytes")
    assert claims.user_id == "u42"
    assert claims.email == "joe@bloggs.com"


def test_generate_token_without_secret(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", None)
    result = CliRunner().invoke(cli.cli, ["generate-token", "--user-id", "u42",
                                          "--email", "joe@bloggs.com"])
    assert result.exit_code != 0
