import os
import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "sqldemo_test.db"
    # Point the test environment at this temp DB
    os.environ["APP_ENV"] = "test"
    os.environ["DEMO_DB_PATH"] = str(path)
    from sqldemo.db import open_database
    from sqldemo.services import seed_svc

    db = open_database()
    try:
        seed_svc.ensure_schema(db)
    finally:
        db.destroy()
    return str(path)


@pytest.fixture()
def db(tmp_db_path):
    # Safety: only ever reseed the temp DB, never a real one
    assert os.environ.get("DEMO_DB_PATH") == tmp_db_path, "Refusing to reseed non-temp DB"
    from sqldemo.db import open_database
    from sqldemo.services import seed_svc

    database = open_database()
    seed_svc.reset_data(database)
    seed_svc.seed_data(database)
    yield database
    database.destroy()
