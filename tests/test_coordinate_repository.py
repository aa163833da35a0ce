from uuid import uuid4

from conftest import RecordingConnection
from coordinates import repository


async def test_create_coordinate_inserts_and_returns_row():
    row = {"id": uuid4(), "latitude": 1.5, "longitude": -2.5, "created_at": None}
    conn = RecordingConnection(row)

    result = await repository.create_coordinate(conn, latitude=1.5, longitude=-2.5)

    assert result == row
    sql, args = conn.calls[0]
    assert "INSERT INTO coordinates" in sql
    assert args == (1.5, -2.5)


async def test_get_coordinate_missing_returns_none():
    conn = RecordingConnection(None)
    assert await repository.get_coordinate(conn, uuid4()) is None


async def test_update_coordinate_binds_id_last():
    coordinate_id = uuid4()
    conn = RecordingConnection({"id": coordinate_id, "latitude": 3.0, "longitude": 4.0, "created_at": None})

    result = await repository.update_coordinate(conn, coordinate_id, latitude=3.0, longitude=4.0)

    assert result["latitude"] == 3.0
    sql, args = conn.calls[0]
    assert "WHERE id = $3" in sql
    assert args == (3.0, 4.0, coordinate_id)


async def test_delete_coordinate_reports_whether_row_existed():
    assert await repository.delete_coordinate(RecordingConnection({"id": uuid4()}), uuid4()) is True
    assert await repository.delete_coordinate(RecordingConnection(None), uuid4()) is False
