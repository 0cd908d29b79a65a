from decimal import Decimal

import pytest

from models.assignments import Assignment
from models.scores import Score
from services.score_store import (
    AssignmentAccessError,
    ScoreKey,
    ScoreValidationError,
    find_comments,
    find_scores_for_cohort,
    find_scores_for_student_term,
    find_subject_teachers,
    submit_scores,
    upsert_score,
    validate_score,
)


def test_validate_score_range():
    assert validate_score("72.5") == Decimal("72.5")
    assert validate_score(0) == 0
    assert validate_score(100) == 100
    for bad in (-1, Decimal("100.01"), "abc", None):
        with pytest.raises(ScoreValidationError):
            validate_score(bad, student_id=1)


def test_find_scores_for_student_term(db_session, seed):
    alice = seed["students"]["Alice"]
    entries = find_scores_for_student_term(db_session, alice.id, seed["term"].id)

    assert sorted((e.subject_name, Decimal(e.value)) for e in entries) == [
        ("Biology", Decimal("40")),
        ("English", Decimal("60")),
        ("Mathematics", Decimal("80")),
    ]


def test_find_scores_for_cohort_includes_students_without_scores(db_session, seed):
    cohort = find_scores_for_cohort(db_session, seed["class"].id, None, seed["term"].id, "2024")

    assert [s.fullname for s, _ in cohort] == [
        "Alice Achieng", "Brian Kamau", "Cate Njeri", "Dan Mwangi", "Eve Chebet",
    ]
    assert dict((s.fullname, len(e)) for s, e in cohort)["Eve Chebet"] == 0


def test_find_scores_for_cohort_filters_stream(db_session, seed):
    cohort = find_scores_for_cohort(db_session, seed["class"].id, seed["east"].id, seed["term"].id)
    assert [s.fullname for s, _ in cohort] == ["Alice Achieng", "Brian Kamau"]


def test_upsert_replaces_existing_value(db_session, seed):
    alice = seed["students"]["Alice"]
    assignment = seed["assignments"][(seed["east"].id, seed["biology"].id)]
    key = ScoreKey(assignment.id, alice.id, seed["term"].id)

    upsert_score(db_session, key, 55, assignment.teacher_id)
    db_session.commit()

    rows = db_session.query(Score).filter_by(assignment_id=assignment.id, student_id=alice.id).all()
    assert len(rows) == 1
    assert Decimal(rows[0].score) == Decimal("55")


def test_submit_scores_requires_owned_assignment(db_session, seed):
    assignment = seed["assignments"][(seed["east"].id, seed["biology"].id)]
    with pytest.raises(AssignmentAccessError):
        submit_scores(db_session, assignment.id, seed["term"].id, [(1, 50)], seed["maths_teacher"].id)


def test_submit_scores_is_all_or_nothing(db_session, seed):
    alice, brian = seed["students"]["Alice"], seed["students"]["Brian"]
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]

    with pytest.raises(ScoreValidationError):
        submit_scores(
            db_session, assignment.id, seed["term"].id,
            [(alice.id, 10), (brian.id, 120)], assignment.teacher_id,
        )

    score = db_session.query(Score).filter_by(assignment_id=assignment.id, student_id=alice.id).one()
    assert Decimal(score.score) == Decimal("80")


def test_submit_scores_saves_all(db_session, seed):
    alice, brian = seed["students"]["Alice"], seed["students"]["Brian"]
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]

    saved = submit_scores(
        db_session, assignment.id, seed["term"].id,
        [(alice.id, 85), (brian.id, "88.5")], assignment.teacher_id,
    )

    assert [Decimal(s.score) for s in saved] == [Decimal("85"), Decimal("88.5")]


def test_subject_teachers_and_comments(db_session, seed):
    alice = seed["students"]["Alice"]
    teachers = find_subject_teachers(db_session, alice.id, seed["term"].id)
    comments = find_comments(db_session, alice.id, seed["term"].id)

    assert teachers[seed["biology"].id] == "John Otieno"
    assert teachers[seed["maths"].id] == "Mary Wanjiru"
    assert [c.type for c in comments] == ["general", "academic"]


def test_find_scores_for_student_term_filters_academic_year(db_session, seed):
    alice = seed["students"]["Alice"]
    old = Assignment(
        teacher_id=seed["bio_teacher"].id, subject_id=seed["biology"].id, class_id=seed["class"].id,
        stream_id=seed["east"].id, academic_year="2023", term_id=seed["term"].id,
    )
    db_session.add(old)
    db_session.flush()
    db_session.add(Score(
        assignment_id=old.id, student_id=alice.id, term_id=seed["term"].id,
        score=Decimal("15"), submitted_by=seed["bio_teacher"].id,
    ))
    db_session.commit()

    assert len(find_scores_for_student_term(db_session, alice.id, seed["term"].id)) == 4
    entries = find_scores_for_student_term(db_session, alice.id, seed["term"].id, "2024")
    assert sorted(Decimal(e.value) for e in entries) == [Decimal("40"), Decimal("60"), Decimal("80")]
