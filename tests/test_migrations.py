"""Alembic migrations build the same indexes the models declare."""
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from loggen.models import db

ROOT = Path(__file__).resolve().parent.parent


def _upgrade_head(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("LOGGEN_AUTO_CREATE", "0")
    monkeypatch.setenv("LOGGEN_UPLOAD_DIR", str(tmp_path / "uploads"))
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    command.upgrade(cfg, "head")
    return create_engine(url)


def test_upgrade_creates_model_indexes(tmp_path, monkeypatch):
    engine = _upgrade_head(tmp_path, monkeypatch)
    insp = inspect(engine)
    try:
        for table in db.metadata.sorted_tables:
            expected = {ix.name for ix in table.indexes}
            migrated = {ix["name"] for ix in insp.get_indexes(table.name)}
            assert expected <= migrated, table.name
    finally:
        engine.dispose()


def test_meetings_archived_index(tmp_path, monkeypatch):
    engine = _upgrade_head(tmp_path, monkeypatch)
    try:
        names = {ix["name"] for ix in inspect(engine).get_indexes("meetings")}
        assert "ix_meetings_archived" in names
    finally:
        engine.dispose()
