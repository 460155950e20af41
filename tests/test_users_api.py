from __future__ import annotations

from fittrack.core.registry import FitnessRegistry


def _skip(msg: str) -> None:  # pragma: no cover
    try:
        import pytest  # type: ignore

        pytest.skip(msg)
    except Exception:
        raise RuntimeError(msg)


def _client(registry: FitnessRegistry | None = None):
    from fittrack.runtime.app import create_app

    try:
        from fastapi.testclient import TestClient
    except Exception as e:  # pragma: no cover
        _skip(f"TestClient not available ({e!r}); install test extras to run this test")
        return None

    return TestClient(create_app(registry if registry is not None else FitnessRegistry()))


ALICE = {"id": "u1", "name": "Alice", "age": 30, "weight": 70, "height": 165}


def test_user_lifecycle_over_http() -> None:
    client = _client()

    res = client.post("/api/users", json=ALICE)
    assert res.status_code == 201
    assert res.json()["workouts"] == []
    assert res.json()["workoutCount"] == 0

    run = client.post("/api/users/u1/workouts", json={"type": "running", "duration": 30, "caloriesBurned": 300})
    assert run.status_code == 201
    assert run.json()["date"] is not None

    yoga = client.post(
        "/api/users/u1/workouts",
        json={"type": "yoga", "duration": 45, "caloriesBurned": 200, "date": "2024-05-01T07:30:00Z"},
    )
    assert yoga.status_code == 201
    assert yoga.json()["date"] == "2024-05-01T07:30:00+00:00"

    every = client.get("/api/users/u1/workouts").json()
    assert [w["type"] for w in every] == ["running", "yoga"]

    running = client.get("/api/users/u1/workouts", params={"type": "running"}).json()
    assert len(running) == 1 and running[0]["caloriesBurned"] == 300

    none = client.get("/api/users/u1/workouts", params={"type": "Running"})
    assert none.status_code == 200
    assert none.json() == []

    patched = client.patch("/api/users/u1", json={"age": 31, "weight": 72})
    assert patched.status_code == 200
    body = patched.json()
    assert (body["age"], body["weight"], body["height"], body["workoutCount"]) == (31, 72, 165, 2)

    users = client.get("/api/users").json()
    assert [u["id"] for u in users] == ["u1"]


def test_error_statuses_and_details() -> None:
    registry = FitnessRegistry()
    client = _client(registry)
    client.post("/api/users", json=ALICE)

    dup = client.post("/api/users", json={**ALICE, "name": "Other"})
    assert dup.status_code == 409
    assert dup.json()["detail"]["userId"] == "u1"

    bad = client.post("/api/users", json={**ALICE, "id": "u2", "height": 0})
    assert bad.status_code == 400
    assert bad.json()["detail"]["field"] == "height"
    assert registry.get_user("u2") is None

    missing = client.post("/api/users", json={"id": "u3", "name": "NoAge"})
    assert missing.status_code == 400
    assert "age" in missing.json()["detail"]["message"]

    unknown = client.get("/api/users/missing")
    assert unknown.status_code == 404
    assert unknown.json()["detail"]["userId"] == "missing"

    no_user = client.post("/api/users/missing/workouts", json={"type": "running", "duration": 30, "caloriesBurned": 300})
    assert no_user.status_code == 404

    neg = client.post("/api/users/u1/workouts", json={"type": "running", "duration": -1, "caloriesBurned": 300})
    assert neg.status_code == 400
    assert neg.json()["detail"]["field"] == "duration"
    assert registry.get_all_workouts_of("u1") == ()

    bad_date = client.post(
        "/api/users/u1/workouts",
        json={"type": "running", "duration": 30, "caloriesBurned": 300, "date": "yesterday"},
    )
    assert bad_date.status_code == 400

    atomic = client.patch("/api/users/u1", json={"age": 40, "weight": -5})
    assert atomic.status_code == 400
    assert atomic.json()["detail"]["field"] == "weight"
    assert registry.get_user("u1").age == 30  # type: ignore[union-attr]

    identity = client.patch("/api/users/u1", json={"id": "u9"})
    assert identity.status_code == 400
    assert identity.json()["detail"]["field"] == "id"

    ghost = client.patch("/api/users/missing", json={"age": 40})
    assert ghost.status_code == 404


def test_health_and_events() -> None:
    client = _client()

    assert client.get("/healthz").json() == {"ok": True}
    assert client.get("/api/events").json() == {"globalRevision": 0}
    client.post("/api/users", json=ALICE)
    assert client.get("/api/events").json() == {"globalRevision": 1}


def test_sample_seed_is_opt_in(monkeypatch) -> None:
    from fittrack.runtime.app import create_app

    monkeypatch.delenv("FITTRACK_SAMPLE", raising=False)
    assert create_app().state.registry.get_users() == []

    monkeypatch.setenv("FITTRACK_SAMPLE", "1")
    seeded = create_app().state.registry
    assert [u.name for u in seeded.get_users()] == ["Alice", "Bob"]
    alice = seeded.get_user("1")
    assert (alice.age, alice.weight) == (31, 72)
    assert [w.type for w in alice.workouts] == ["running", "yoga"]

    assert create_app(sample=False).state.registry.get_users() == []


def test_bad_bodies_are_400_with_message() -> None:
    registry = FitnessRegistry()
    client = _client(registry)
    client.post("/api/users", json=ALICE)

    not_object = client.post("/api/users", json=[1, 2])
    assert not_object.status_code == 400
    assert not_object.json()["detail"]["message"] == "Body must be a JSON object"

    patch_list = client.patch("/api/users/u1", json=["age", 40])
    assert patch_list.status_code == 400
    assert patch_list.json()["detail"]["message"] == "Body must be a JSON object"

    no_body = client.post("/api/users/u1/workouts")
    assert no_body.status_code == 400

    garbled = client.post("/api/users", content=b"{not json", headers={"content-type": "application/json"})
    assert garbled.status_code == 400
    assert "message" in garbled.json()["detail"]


def test_out_of_range_unix_date_is_rejected() -> None:
    registry = FitnessRegistry()
    client = _client(registry)
    client.post("/api/users", json=ALICE)

    res = client.post("/api/users/u1/workouts", json={"type": "running", "duration": 30, "caloriesBurned": 300, "date": 1e20})

    assert res.status_code == 400
    assert res.json()["detail"]["message"] == "Invalid date"
    assert registry.get_all_workouts_of("u1") == ()


def test_escaped_ids_reach_the_right_user() -> None:
    client = _client()
    client.post("/api/users", json={**ALICE, "id": "a"})
    client.post("/api/users", json={**ALICE, "id": "a?b", "name": "Query"})

    res = client.get("/api/users/a%3Fb")
    assert res.status_code == 200
    assert res.json()["name"] == "Query"

    slash = client.post("/api/users", json={**ALICE, "id": "x/y"})
    assert slash.status_code == 400
    assert slash.json()["detail"]["field"] == "id"


def test_no_cross_origin_headers() -> None:
    client = _client()

    res = client.get("/healthz", headers={"Origin": "http://localhost:5173"})

    assert res.status_code == 200
    assert "access-control-allow-origin" not in res.headers


def test_http_errors_chain_the_registry_error() -> None:
    import pytest
    from fastapi import HTTPException

    from fittrack.core.errors import DuplicateUserError
    from fittrack.runtime.app import create_app

    registry = FitnessRegistry()
    registry.add_user("u1", "Alice", 30, 70, 165)
    app = create_app(registry)
    route = next(r for r in app.routes if getattr(r, "path", None) == "/api/users" and "POST" in (getattr(r, "methods", None) or ()))

    with pytest.raises(HTTPException) as info:
        route.endpoint(body=dict(ALICE))

    assert info.value.status_code == 409
    assert isinstance(info.value.__cause__, DuplicateUserError)
