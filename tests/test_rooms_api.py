from app.models.schedule import Schedule


def test_list_rooms_sorted_by_name(client):
    names = [r["name"] for r in client.get("/rooms").json()]
    assert names == ["Lab 2", "Room 101"]


def test_create_room(client):
    res = client.post("/rooms", json={"name": " Studio ", "capacity": 12, "resources": ["piano"]})
    assert res.status_code == 201
    data = res.json()
    assert data["name"] == "Studio"
    assert data["type"] == "CLASSROOM"
    assert data["status"] == "AVAILABLE"
    assert data["resources"] == ["piano"]


def test_duplicate_room_name(client):
    res = client.post("/rooms", json={"name": "Room 101"})
    assert res.status_code == 409
    assert res.json()["error"] == "Room name already exists"


def test_update_room(client, seed):
    res = client.put(f"/rooms/{seed.room}", json={"capacity": 40, "status": "MAINTENANCE"})
    assert res.status_code == 200
    assert res.json()["capacity"] == 40
    assert res.json()["status"] == "MAINTENANCE"

    res = client.put(f"/rooms/{seed.room}", json={"name": "Lab 2"})
    assert res.status_code == 409


def test_missing_room(client):
    assert client.get("/rooms/9999").status_code == 404
    assert client.delete("/rooms/9999").status_code == 404


def test_delete_room_keeps_schedule_location(client, proposal, seed, db):
    created = client.post("/schedules", json=proposal(roomId=seed.room)).json()

    assert client.delete(f"/rooms/{seed.room}").status_code == 200

    s = db.get(Schedule, created["id"])
    assert s.room_id is None
    assert s.location == "Room 101"
