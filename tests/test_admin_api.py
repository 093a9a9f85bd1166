from app.models.schedule import Schedule
from app.models.user import User
from app.seed import seed_admin
from app.utils.hashing import verify_password


def _login(client, username, password):
    res = client.post("/auth/login", data={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


def test_seed_admin_is_idempotent(db):
    first = seed_admin(db, "root", "root-pass")
    again = seed_admin(db, "root", "other-pass")

    assert first.id == again.id
    assert first.role == "admin"
    assert db.query(User).filter(User.username == "root").count() == 1
    # an existing account keeps its password
    assert verify_password("root-pass", again.password_hash)


def test_seed_admin_promotes_existing_user(db, seed):
    user = seed_admin(db, "s.lee", "ignored")
    assert user.id == seed.student
    assert user.role == "admin"


def test_fresh_database_can_reach_schedule_writes(raw_client, db):
    seed_admin(db, "root", "root-pass")
    admin = _login(raw_client, "root", "root-pass")

    res = raw_client.post("/admin/users", headers=admin, json={
        "username": "t.smith", "password": "teach-pass", "role": "teacher",
        "first_name": "Tom", "last_name": "Smith",
    })
    assert res.status_code == 201, res.text
    teacher_id = res.json()["id"]

    group = raw_client.post("/groups", headers=admin, json={"name": "Grade 7A"}).json()
    course = raw_client.post("/courses", headers=admin, json={"code": "MATH-7", "name": "Mathematics 7"}).json()

    teacher = _login(raw_client, "t.smith", "teach-pass")
    res = raw_client.post("/schedules", headers=teacher, json={
        "title": "Algebra",
        "creatorId": teacher_id,
        "assignedToTeacherId": teacher_id,
        "assignedToGroupId": group["id"],
        "courseId": course["id"],
        "isRecurring": True,
        "daysOfWeek": ["MON"],
        "sessions": [{"startTime": "09:00", "endTime": "10:00"}],
    })
    assert res.status_code == 201, res.text
    assert res.json()["groupName"] == "Grade 7A"
    assert res.json()["courseName"] == "Mathematics 7"


def test_non_admin_cannot_manage_users(raw_client):
    raw_client.post("/auth/register", json={"username": "alice", "password": "s3cret-pass"})
    student = _login(raw_client, "alice", "s3cret-pass")
    res = raw_client.post("/admin/users", headers=student, json={
        "username": "mallory", "password": "whatever1", "role": "admin",
    })
    assert res.status_code == 403


def test_admin_user_management(client, seed):
    res = client.post("/admin/users", json={"username": "t.new", "password": "teach-pass", "role": "teacher"})
    assert res.status_code == 201
    new_id = res.json()["id"]

    assert client.post("/admin/users", json={"username": "t.new", "password": "teach-pass"}).status_code == 409

    res = client.put(f"/admin/users/{seed.student}", json={"role": "teacher", "last_name": "Lee"})
    assert res.status_code == 200
    assert res.json()["role"] == "teacher"

    assert client.put(f"/admin/users/{seed.student}", json={"role": "owner"}).status_code == 400
    assert client.patch(f"/admin/users/{new_id}/password", json={"new_password": "fresh-pass"}).status_code == 200
    assert client.get("/admin/users/9999").status_code == 404

    teachers = client.get("/admin/users", params={"role": "teacher"}).json()
    assert teachers["total"] == 4
    assert {u["username"] for u in teachers["items"]} == {"t.smith", "t.jones", "s.lee", "t.new"}


def test_group_crud(client, seed):
    res = client.post("/groups", json={"name": "Grade 8A", "member_ids": [seed.student]})
    assert res.status_code == 201
    group = res.json()
    assert [m["username"] for m in group["members"]] == ["s.lee"]

    assert client.post("/groups", json={"name": "Grade 8A"}).status_code == 409
    assert client.post("/groups", json={"name": "Grade 8B", "member_ids": [9999]}).status_code == 404

    res = client.put(f"/groups/{group['id']}", json={"name": "Grade 8C", "member_ids": []})
    assert res.status_code == 200
    assert res.json()["name"] == "Grade 8C"
    assert res.json()["members"] == []

    names = [g["name"] for g in client.get("/groups").json()]
    assert names == ["Grade 7A", "Grade 7B", "Grade 8C"]


def test_delete_group_clears_schedule_reference(client, proposal, seed, db):
    created = client.post("/schedules", json=proposal(assignedToGroupId=seed.group)).json()

    assert client.delete(f"/groups/{seed.group}").status_code == 200
    assert client.get(f"/groups/{seed.group}").status_code == 404

    s = db.get(Schedule, created["id"])
    assert s.assigned_to_group_id is None


def test_course_crud(client, seed, proposal, db):
    res = client.post("/courses", json={"code": "SCI-7", "name": "Science 7"})
    assert res.status_code == 201
    course_id = res.json()["id"]

    assert client.post("/courses", json={"code": "SCI-7", "name": "Dup"}).status_code == 409
    assert client.put(f"/courses/{course_id}", json={"code": "MATH-7"}).status_code == 409

    res = client.put(f"/courses/{course_id}", json={"name": "Natural Science 7"})
    assert res.json()["name"] == "Natural Science 7"

    found = client.get("/courses", params={"keyword": "science"}).json()
    assert [c["code"] for c in found] == ["SCI-7"]

    created = client.post("/schedules", json=proposal(courseId=course_id)).json()
    assert client.delete(f"/courses/{course_id}").status_code == 200
    assert db.get(Schedule, created["id"]).course_id is None
    assert client.get(f"/courses/{course_id}").status_code == 404
