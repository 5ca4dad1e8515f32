import pytest

import storage


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point every snapshot read/write at a throwaway directory."""
    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def client(data_dir):
    import api

    api.app.config["TESTING"] = True
    with api.app.test_client() as test_client:
        yield test_client


def make_booking(name, time, party_size, table_id=None, date="2025-09-05", duration=None):
    booking = {
        "id": name.lower().replace(" ", "-"),
        "date": date,
        "time": time,
        "party_size": party_size,
        "table_id": table_id,
        "name": name,
        "notes": None,
    }
    if duration is not None:
        booking["duration_minutes"] = duration
    return booking
