from decimal import Decimal

import pytest

from models.scores import Score
from models.students import Student
from scripts.import_scores import migrate_scores
from scripts.import_students import migrate_students
from services.score_store import ScoreValidationError


def test_migrate_students_skips_existing(db_session, seed, tmp_path):
    csv_path = tmp_path / "students.csv"
    csv_path.write_text(
        "admission_number,fullname,class_id,stream_id,gender,date_of_birth,guardian_phone\n"
        f"ADM-001,Alice Achieng,{seed['class'].id},{seed['east'].id},female,,\n"
        f"ADM-020,Grace Auma,{seed['class'].id},{seed['west'].id},female,2010-03-14,+254700000020\n",
        encoding="utf-8",
    )

    assert migrate_students(str(csv_path), db=db_session) == 1
    grace = db_session.query(Student).filter_by(admission_number="ADM-020").one()
    assert grace.date_of_birth.year == 2010


def test_migrate_scores_upserts(db_session, seed, tmp_path):
    alice = seed["students"]["Alice"]
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]
    csv_path = tmp_path / "scores.csv"
    csv_path.write_text(
        "assignment_id,student_id,term_id,score,submitted_by\n"
        f"{assignment.id},{alice.id},{seed['term'].id},66.5,{assignment.teacher_id}\n",
        encoding="utf-8",
    )

    assert migrate_scores(str(csv_path), db=db_session) == 1
    score = db_session.query(Score).filter_by(assignment_id=assignment.id, student_id=alice.id).one()
    assert Decimal(score.score) == Decimal("66.5")


def test_migrate_scores_rolls_back_on_bad_row(db_session, seed, tmp_path):
    alice, brian = seed["students"]["Alice"], seed["students"]["Brian"]
    assignment = seed["assignments"][(seed["east"].id, seed["maths"].id)]
    term_id = seed["term"].id
    csv_path = tmp_path / "scores.csv"
    csv_path.write_text(
        "assignment_id,student_id,term_id,score,submitted_by\n"
        f"{assignment.id},{alice.id},{term_id},10,{assignment.teacher_id}\n"
        f"{assignment.id},{brian.id},{term_id},101,{assignment.teacher_id}\n",
        encoding="utf-8",
    )

    with pytest.raises(ScoreValidationError):
        migrate_scores(str(csv_path), db=db_session)

    score = db_session.query(Score).filter_by(assignment_id=assignment.id, student_id=alice.id).one()
    assert Decimal(score.score) == Decimal("80")
