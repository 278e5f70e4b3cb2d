from shinyhunt.backend import SqlHuntStore
from shinyhunt.health import check_store


def test_missing_store(tmp_path):
    assert check_store(tmp_path / "hunts.db") == {"store_ok": False, "last_updated": None}


def test_existing_store(tmp_path):
    db = tmp_path / "hunts.db"
    SqlHuntStore(db).write_hunt("ash", 25, {"encounters": 1})
    info = check_store(db)
    assert info["store_ok"] is True
    assert info["last_updated"] is not None


def test_corrupt_store(tmp_path):
    db = tmp_path / "hunts.db"
    db.write_bytes(b"not a database")
    assert check_store(db)["store_ok"] is False
