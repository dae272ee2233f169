"""End-to-end API tests: commit, complete, records, analytics."""
import uuid

import pytest

API = "/api/v1"


def _commit_body(workout_id, day, bench, squat, completed=True):
    sets = []
    for exercise_id, name, performed in (("bench", "Bench Press", bench), ("squat", "Squat", squat)):
        for index, (reps, weight) in enumerate(performed):
            sets.append(
                {
                    "set_id": str(uuid.uuid4()),
                    "exercise_id": exercise_id,
                    "exercise_name": name,
                    "set_index": index,
                    "reps": reps,
                    "weight": weight,
                    "completed": True,
                }
            )
    return {
        "workout": {
            "workout_id": workout_id,
            "started_at": f"2026-03-{day:02d}T09:00:00Z",
            "completed_at": f"2026-03-{day:02d}T10:00:00Z" if completed else None,
            "routine_name": "Full Body",
            "updated_at_client": 1,
            "schema_version": 1,
        },
        "sets": sets,
    }


async def _commit_and_complete(client, day, bench, squat):
    workout_id = str(uuid.uuid4())
    response = await client.post(f"{API}/workouts/commit", json=_commit_body(workout_id, day, bench, squat))
    assert response.status_code == 200
    response = await client.post(f"{API}/workouts/{workout_id}/complete")
    assert response.status_code == 200
    return workout_id, response.json()


async def test_health(client):
    response = await client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_commit_then_read(client):
    workout_id = str(uuid.uuid4())
    body = _commit_body(workout_id, 1, [(8, 100), (6, 120)], [(5, 200)])
    response = await client.post(f"{API}/workouts/commit", json=body)
    assert response.json() == {"workout_id": workout_id, "status": "completed", "set_count": 3}

    response = await client.get(f"{API}/workouts/{workout_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert [(s["exercise_id"], s["set_index"]) for s in data["sets"]] == [("bench", 0), ("bench", 1), ("squat", 0)]

    # Re-committing replaces the sets
    body["sets"] = body["sets"][:1]
    await client.post(f"{API}/workouts/commit", json=body)
    response = await client.get(f"{API}/workouts/{workout_id}")
    assert len(response.json()["sets"]) == 1


async def test_commit_rejects_invalid_payload(client):
    body = _commit_body(str(uuid.uuid4()), 1, [(None, 100)], [])
    response = await client.post(f"{API}/workouts/commit", json=body)
    assert response.status_code == 400
    assert "Completed sets must include reps and weight" in response.json()["detail"]


async def test_commit_rejects_other_users_workout(client):
    workout_id = str(uuid.uuid4())
    body = _commit_body(workout_id, 1, [(8, 100)], [])
    await client.post(f"{API}/workouts/commit", json=body)
    response = await client.post(f"{API}/workouts/commit", json=body, headers={"X-User-Id": "someone-else"})
    assert response.status_code == 400


async def test_unknown_workout(client):
    missing = uuid.uuid4()
    assert (await client.get(f"{API}/workouts/{missing}")).status_code == 404
    assert (await client.post(f"{API}/workouts/{missing}/complete")).status_code == 404


async def test_first_workout_sets_first_prs(client):
    _, result = await _commit_and_complete(client, 1, [(8, 100), (6, 120)], [(5, 200)])

    assert result["total_volume"] == 2520
    assert result["exercise_volumes"] == {"bench": 1520, "squat": 1000}
    assert result["stats"]["completed_sets"] == 3
    assert result["pr_count"] == 6
    assert {pr["status"] for pr in result["prs"]} == {"first_pr"}
    assert len(result["saved_records"]) == 6
    assert "First PR: Bench Press - Heaviest set (120 lbs)" in result["pr_messages"]
    assert result["progression"]["progressed_sets"] == 3
    assert result["progression"]["overall_status"] == "progressed"
    assert result["progression"]["biggest_wins"] == []
    assert all(best["is_new_best"] for best in result["best_e1rm"])
    volume_bests = [
        (v["exercise_id"], v["volume"], v["is_new_best"], v["previous_value"]) for v in result["session_volume_bests"]
    ]
    assert volume_bests == [
        ("bench", 1520, True, None),
        ("squat", 1000, True, None),
    ]


async def test_second_workout_new_and_tied(client):
    await _commit_and_complete(client, 1, [(8, 100), (6, 120)], [(5, 200)])
    workout_id, result = await _commit_and_complete(client, 8, [(8, 120), (6, 120)], [(5, 200)])

    statuses = {(pr["exerciseId"], pr["metric"]): pr["status"] for pr in result["prs"]}
    assert statuses == {
        ("bench", "weight"): "tied_pr",
        ("bench", "reps"): "tied_pr",
        ("bench", "volume"): "new_pr",
        ("squat", "weight"): "tied_pr",
        ("squat", "reps"): "tied_pr",
        ("squat", "volume"): "tied_pr",
    }
    assert result["pr_count"] == 1
    assert result["progression"]["progressed_sets"] == 1
    assert result["progression"]["matched_sets"] == 2
    assert result["progression"]["overall_status"] == "maintained"
    assert result["progression"]["biggest_wins"] == [{"exercise_name": "Bench Press", "improvement": "+20 lb"}]

    bench_best = next(b for b in result["best_e1rm"] if b["exercise_id"] == "bench")
    assert bench_best["value"] == pytest.approx(152.0)
    assert bench_best["previous_value"] == pytest.approx(144.0)
    assert bench_best["is_new_best"] is True

    volume_bests = {v["exercise_id"]: v for v in result["session_volume_bests"]}
    assert volume_bests["bench"]["volume"] == 1680
    assert volume_bests["bench"]["previous_value"] == 1520
    assert volume_bests["bench"]["is_new_best"] is True
    # Equal to the earlier session is not a new best
    assert volume_bests["squat"]["previous_value"] == 1000
    assert volume_bests["squat"]["is_new_best"] is False

    workout = (await client.get(f"{API}/workouts/{workout_id}")).json()
    assert workout["pr_count"] == 1
    assert workout["total_volume"] == 960 + 720 + 1000

    records = (await client.get(f"{API}/pr/exercises/bench")).json()
    by_metric = {r["metric"]: r for r in records}
    assert by_metric["volume"]["valueNumber"] == 960
    assert by_metric["volume"]["contextJson"]["setIndex"] == 0
    # Tied records keep the workout that first set them
    assert by_metric["weight"]["achievedAt"] == "2026-03-01T10:00:00+00:00"


async def test_completing_twice_keeps_pr_count(client):
    workout_id, first = await _commit_and_complete(client, 1, [(8, 100)], [])
    assert first["pr_count"] == 3

    response = await client.post(f"{API}/workouts/{workout_id}/complete")
    again = response.json()
    assert {pr["status"] for pr in again["prs"]} == {"tied_pr"}
    assert again["pr_count"] == 3
    assert (await client.get(f"{API}/workouts/{workout_id}")).json()["pr_count"] == 3


async def test_later_workout_is_not_history(client):
    earlier_id = str(uuid.uuid4())
    await client.post(f"{API}/workouts/commit", json=_commit_body(earlier_id, 1, [(8, 100)], []))
    await client.post(f"{API}/workouts/commit", json=_commit_body(str(uuid.uuid4()), 20, [(8, 150)], []))

    result = (await client.post(f"{API}/workouts/{earlier_id}/complete")).json()
    assert result["progression"]["progressed_sets"] == 1
    assert result["progression"]["regressed_sets"] == 0
    assert result["best_e1rm"][0]["previous_value"] is None
    assert result["best_e1rm"][0]["is_new_best"] is True


async def test_draft_is_not_history(client):
    draft = _commit_body(str(uuid.uuid4()), 1, [(8, 150)], [], completed=False)
    response = await client.post(f"{API}/workouts/commit", json=draft)
    assert response.json()["status"] == "draft"

    _, result = await _commit_and_complete(client, 8, [(8, 100)], [])
    assert result["progression"]["progressed_sets"] == 1
    assert result["progression"]["regressed_sets"] == 0
    assert result["session_volume_bests"][0]["previous_value"] is None


async def test_excluded_exercises(client):
    workout_id = str(uuid.uuid4())
    await client.post(f"{API}/workouts/commit", json=_commit_body(workout_id, 1, [(8, 100)], [(5, 200)]))
    response = await client.post(
        f"{API}/workouts/{workout_id}/complete", json={"excluded_exercises": ["Squat"]}
    )
    assert {pr["exerciseId"] for pr in response.json()["prs"]} == {"bench"}


async def test_records_listing_and_clear(client):
    await _commit_and_complete(client, 1, [(8, 100)], [(5, 200)])

    records = (await client.get(f"{API}/pr")).json()
    assert len(records) == 6
    assert {"valueNumber", "achievedAt", "contextJson", "exerciseId"} <= set(records[0])

    grouped = (await client.get(f"{API}/pr/by-exercise")).json()
    assert sorted(grouped) == ["Bench Press", "Squat"]

    # Records are per user
    assert (await client.get(f"{API}/pr", headers={"X-User-Id": "someone-else"})).json() == []

    assert (await client.delete(f"{API}/pr")).json() == {"deleted": 6}
    assert (await client.get(f"{API}/pr")).json() == []


async def test_set_flags_endpoint(client):
    response = await client.post(
        f"{API}/analytics/set-flags",
        json={"reps": "18", "weight": 100, "history_reps": [8, 10, 9]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["flags"] == ["rep_outlier"]
    assert data["suggested_reps"] == 9
    assert data["is_hard_invalid"] is False


async def test_week_over_week_endpoint(client):
    response = await client.get(f"{API}/analytics/week-over-week", params={"current": 1000, "previous": 0})
    assert response.json() == {"delta": 1000, "percent": 0}
