import pytest


@pytest.fixture
def teacher_headers(seed, headers_for):
    def _headers(key="maths_teacher"):
        return headers_for("teacher", seed[key].id)
    return _headers


def test_requests_without_token_are_rejected(client, seed):
    res = client.get(f"/v1/scores/student/1/term/{seed['term'].id}")
    assert res.status_code == 401
    assert res.json()["success"] is False
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


def test_wrong_token_is_rejected(client, seed):
    headers = {"Authorization": "Bearer nope", "X-User-Role": "dos"}
    res = client.get(f"/v1/scores/student/1/term/{seed['term'].id}", headers=headers)
    assert res.status_code == 401


def test_submit_scores(client, seed, teacher_headers):
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]
    alice, brian = seed["students"]["Alice"], seed["students"]["Brian"]
    payload = {
        "assignment_id": assignment.id,
        "term_id": seed["term"].id,
        "scores": [{"student_id": alice.id, "score": 85}, {"student_id": brian.id, "score": 77.5}],
    }

    res = client.post("/v1/scores/submit", json=payload, headers=teacher_headers())

    assert res.status_code == 201
    body = res.json()
    assert body["count"] == 2
    assert [(r["score"], r["grade"]) for r in body["data"]] == [(85.0, "A"), (77.5, "A-")]


def test_submit_scores_for_unassigned_subject_is_forbidden(client, seed, teacher_headers):
    assignment = seed["assignments"][(seed["east"].id, seed["biology"].id)]
    payload = {
        "assignment_id": assignment.id,
        "term_id": seed["term"].id,
        "scores": [{"student_id": seed["students"]["Alice"].id, "score": 50}],
    }
    res = client.post("/v1/scores/submit", json=payload, headers=teacher_headers())
    assert res.status_code == 403


def test_submit_out_of_range_score(client, seed, teacher_headers):
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]
    payload = {
        "assignment_id": assignment.id,
        "term_id": seed["term"].id,
        "scores": [{"student_id": seed["students"]["Alice"].id, "score": 150}],
    }
    res = client.post("/v1/scores/submit", json=payload, headers=teacher_headers())
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_SCORE"


def test_submit_requires_teacher_role(client, seed, admin_headers, headers_for):
    payload = {"assignment_id": 1, "term_id": seed["term"].id, "scores": [{"student_id": 1, "score": 50}]}
    assert client.post("/v1/scores/submit", json=payload, headers=admin_headers).status_code == 403
    assert client.post("/v1/scores/submit", json=payload, headers=headers_for("teacher")).status_code == 403


def test_submit_empty_scores_is_validation_error(client, seed, teacher_headers):
    payload = {"assignment_id": 1, "term_id": seed["term"].id, "scores": []}
    res = client.post("/v1/scores/submit", json=payload, headers=teacher_headers())
    assert res.status_code == 422


def test_read_assignment_scores(client, seed, teacher_headers):
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]
    res = client.get(f"/v1/scores/assignment/{assignment.id}", headers=teacher_headers())

    assert res.status_code == 200
    assert [(r["fullname"], r["score"]) for r in res.json()["data"]] == [
        ("Alice Achieng", 80.0),
        ("Brian Kamau", 90.0),
    ]

    other = client.get(f"/v1/scores/assignment/{assignment.id}", headers=teacher_headers("bio_teacher"))
    assert other.status_code == 403


def test_read_student_term_scores(client, seed, admin_headers):
    alice, eve = seed["students"]["Alice"], seed["students"]["Eve"]
    term_id = seed["term"].id

    res = client.get(f"/v1/scores/student/{alice.id}/term/{term_id}", headers=admin_headers)
    assert res.status_code == 200
    assert {r["subject_name"]: r["grade"] for r in res.json()["data"]} == {
        "Biology": "D+", "English": "B-", "Mathematics": "A",
    }

    res = client.get(f"/v1/scores/student/{eve.id}/term/{term_id}", headers=admin_headers)
    assert res.status_code == 404


def test_update_and_delete_score_by_owner_only(client, seed, db_session, teacher_headers):
    from models.scores import Score

    assignment = seed["assignments"][(seed["east"].id, seed["biology"].id)]
    score = db_session.query(Score).filter_by(
        assignment_id=assignment.id, student_id=seed["students"]["Alice"].id
    ).one()

    res = client.put(f"/v1/scores/{score.id}", json={"score": 65}, headers=teacher_headers())
    assert res.status_code == 403

    res = client.put(f"/v1/scores/{score.id}", json={"score": 65}, headers=teacher_headers("bio_teacher"))
    assert res.status_code == 200
    assert res.json()["data"]["score"] == 65.0
    assert res.json()["data"]["grade"] == "B"

    res = client.put(f"/v1/scores/{score.id}", json={"score": -1}, headers=teacher_headers("bio_teacher"))
    assert res.status_code == 400

    res = client.delete(f"/v1/scores/{score.id}", headers=teacher_headers("bio_teacher"))
    assert res.status_code == 200
    assert client.delete(f"/v1/scores/{score.id}", headers=teacher_headers("bio_teacher")).status_code == 404


def test_student_performance(client, seed, admin_headers):
    alice = seed["students"]["Alice"]
    res = client.get(f"/v1/scores/performance/student/{alice.id}/term/{seed['term'].id}", headers=admin_headers)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["strengths"] == ["Mathematics"]
    assert data["areas_for_improvement"] == ["Biology"]
    assert data["student"]["average_score"] == 60.0
    assert data["student"]["class_rank"] == 4
    assert data["student"]["stream_rank"] == 2
    assert data["comments"]["general"] == "Works hard in class."


def test_class_performance_for_stream(client, seed, admin_headers):
    url = f"/v1/scores/performance/class/{seed['class'].id}/term/{seed['term'].id}"
    res = client.get(url, params={"stream_id": seed["west"].id}, headers=admin_headers)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["summary"]["total_students"] == 3
    assert data["summary"]["students_with_scores"] == 2
    assert data["summary"]["average_performance"] == 80.0
    assert [(s["fullname"], s["class_rank"], s["stream_rank"]) for s in data["students"]] == [
        ("Cate Njeri", 1, 1),
        ("Dan Mwangi", 3, 2),
        ("Eve Chebet", 5, 3),
    ]
