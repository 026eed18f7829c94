"""Tests for EntityForge CLI commands."""

from pathlib import Path

import pytest
import sqlalchemy as sa
from click.testing import CliRunner

from entityforge.cli.main import cli

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project_env(monkeypatch, tmp_path):
    """Point the CLI at the repository metadata and a per-test database."""
    monkeypatch.chdir(REPO_ROOT / "backend")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ENTITYFORGE_METADATA_PATH", raising=False)
    monkeypatch.setenv("ENTITYFORGE_DB_PATH", str(tmp_path / "data" / "cli.db"))
    return tmp_path


def write_entity(path: Path, name: str, plural: str) -> None:
    entities = path / "entities"
    entities.mkdir(parents=True, exist_ok=True)
    (entities / f"{name.lower()}.yaml").write_text(
        f"entity: {name}\npluralName: {plural}\n"
        "fields:\n  - name: id\n    type: integer\n    primaryKey: true\n"
    )


class TestRoutes:
    def test_prints_route_table(self, runner, project_env):
        result = runner.invoke(cli, ["routes"])
        assert result.exit_code == 0
        assert "Article" in result.output
        assert "GET    /api/v1/articles" in result.output
        assert "POST   /articles/add" in result.output
        assert "DELETE /api/v1/tag/{id}" in result.output

    def test_metadata_option(self, runner, project_env, tmp_path):
        write_entity(tmp_path / "meta", "Widget", "Widgets")
        result = runner.invoke(cli, ["routes", "--metadata", str(tmp_path / "meta")])
        assert result.exit_code == 0
        assert "/api/v1/widgets" in result.output
        assert "/api/v1/articles" not in result.output

    def test_collision_fails(self, runner, project_env, tmp_path):
        write_entity(tmp_path / "meta", "Widget", "Widgets")
        write_entity(tmp_path / "meta", "Gadget", "Widgets")
        result = runner.invoke(cli, ["routes", "--metadata", str(tmp_path / "meta")])
        assert result.exit_code == 1
        assert "widgets" in result.output

    def test_missing_metadata(self, runner, project_env, tmp_path):
        result = runner.invoke(cli, ["routes", "--metadata", str(tmp_path / "nowhere")])
        assert result.exit_code == 1
        assert "Metadata directory not found" in result.output


class TestInitDb:
    def test_creates_tables(self, runner, project_env):
        result = runner.invoke(cli, ["init-db"])
        assert result.exit_code == 0, result.output
        assert "Article -> articles" in result.output
        assert "Initialized 2 table(s)." in result.output

        engine = sa.create_engine(f"sqlite:///{project_env / 'data' / 'cli.db'}")
        try:
            assert set(sa.inspect(engine).get_table_names()) == {"articles", "tags"}
        finally:
            engine.dispose()

    def test_idempotent(self, runner, project_env):
        assert runner.invoke(cli, ["init-db"]).exit_code == 0
        assert runner.invoke(cli, ["init-db"]).exit_code == 0


class TestServe:
    def test_runs_uvicorn_factory(self, runner, project_env, monkeypatch):
        import uvicorn

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
        monkeypatch.setenv("ENTITYFORGE_LOG_LEVEL", "warning")

        result = runner.invoke(cli, ["serve", "--port", "9000"])
        assert result.exit_code == 0
        app, kwargs = calls[0]
        assert app == "entityforge.app:create_app_from_env"
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9000
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["log_level"] == "warning"
