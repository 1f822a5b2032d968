from sqlalchemy import create_engine, inspect


def test_get_engine_kwargs_sqlite_has_check_same_thread():
    from kanbanflow.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./kanbanflow.db")
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_server_database_uses_pool_settings(monkeypatch):
    from kanbanflow.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "7")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_size"] == 3
    assert kwargs["max_overflow"] == 7


def test_debug_enables_echo(monkeypatch):
    from kanbanflow.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite://")["echo"] is True


def test_sqlite_url_detection():
    from kanbanflow.database import database as db

    assert db._is_sqlite_url("sqlite:///./kanbanflow.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_schema_has_task_and_settings_tables(tmp_path):
    from kanbanflow.database import models  # noqa: F401
    from kanbanflow.database.database import Base

    engine = create_engine(f"sqlite:///{tmp_path / 'board.db'}")
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    assert set(inspector.get_table_names()) >= {"tasks", "settings"}
    columns = {column["name"] for column in inspector.get_columns("tasks")}
    assert {"due_date", "status", "completion_date", "bid_origin"} <= columns
