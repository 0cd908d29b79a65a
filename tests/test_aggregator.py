from decimal import Decimal
from types import SimpleNamespace

from schemas.results import Letter
from services.results.aggregator import ScoreEntry, aggregate_student, aggregate_student_record, mean
from services.results.grading import total_scale


def _entries(*values):
    names = ["Mathematics", "English", "Biology", "Chemistry"]
    return [ScoreEntry(i + 1, names[i], v) for i, v in enumerate(values)]


def test_aggregate_three_subjects():
    agg = aggregate_student(1, 1, _entries(80, 60, 40))

    assert agg.total_score == Decimal("180")
    assert agg.subject_count == 3
    assert agg.average_score == Decimal("60.00")
    assert agg.overall_grade == Letter.B_MINUS
    assert agg.has_scores is True


def test_subject_results_sorted_by_name_regardless_of_input_order():
    forward = aggregate_student(1, 1, _entries(80, 60, 40))
    backward = aggregate_student(1, 1, list(reversed(_entries(80, 60, 40))))

    assert [r.subject_name for r in forward.subject_results] == ["Biology", "English", "Mathematics"]
    assert forward == backward


def test_each_subject_graded_with_subject_scale():
    agg = aggregate_student(1, 1, _entries(80, 60, 40))
    grades = {r.subject_name: r.grade for r in agg.subject_results}
    assert grades == {"Mathematics": Letter.A, "English": Letter.B_MINUS, "Biology": Letter.D_PLUS}


def test_empty_scores_give_zero_aggregate():
    agg = aggregate_student(7, 2, [])

    assert agg.total_score == 0
    assert agg.subject_count == 0
    assert agg.average_score == Decimal("0.00")
    assert agg.overall_grade == Letter.E
    assert agg.subject_results == ()
    assert agg.has_scores is False


def test_single_zero_score_is_distinguishable_from_no_scores():
    agg = aggregate_student(7, 2, _entries(0))
    assert agg.average_score == 0
    assert agg.has_scores is True


def test_average_rounds_half_up_to_two_places():
    agg = aggregate_student(1, 1, _entries(Decimal("70.005"), Decimal("70")))
    assert agg.average_score == Decimal("70.00")

    agg = aggregate_student(1, 1, _entries(66, 67, 67))
    assert agg.average_score == Decimal("66.67")


def test_malformed_entries_are_skipped_and_logged(caplog):
    entries = _entries(80, None, "n/a", float("nan"))
    with caplog.at_level("WARNING"):
        agg = aggregate_student(1, 1, entries)

    assert agg.subject_count == 1
    assert agg.total_score == Decimal("80")
    assert "Skipping malformed score" in caplog.text


def test_aggregation_is_idempotent():
    entries = _entries(55, 72, 38)
    assert aggregate_student(1, 1, entries) == aggregate_student(1, 1, entries)


def test_total_basis_grades_on_total():
    agg = aggregate_student(1, 1, _entries(80, 80, 80), scale=total_scale(300))
    assert agg.overall_grade == Letter.A

    agg = aggregate_student(1, 1, _entries(80, 80, 80))
    assert agg.overall_grade == Letter.A


def test_aggregate_student_record_copies_identity():
    student = SimpleNamespace(id=3, admission_number="ADM-3", fullname="Cate", class_id=2, stream_id=5)
    agg = aggregate_student_record(student, 1, "2024", _entries(50))

    assert agg.student_id == 3
    assert agg.admission_number == "ADM-3"
    assert agg.stream_id == 5
    assert agg.academic_year == "2024"


def test_mean_of_nothing_is_zero():
    assert mean([]) == Decimal("0.00")
    assert mean([Decimal("60"), Decimal("70.5")]) == Decimal("65.25")


def test_overall_grade_uses_unrounded_average():
    # 239.99 / 3 = 79.9966... → 표시 평균은 80.00 이지만 등급은 A-
    agg = aggregate_student(1, 1, _entries(80, 80, Decimal("79.99")))

    assert agg.average_score == Decimal("80.00")
    assert agg.overall_grade == Letter.A_MINUS


def test_unrounded_average_just_below_pass_boundary_is_e():
    agg = aggregate_student(1, 1, _entries(30, 30, Decimal("29.99")))

    assert agg.average_score == Decimal("30.00")
    assert agg.overall_grade == Letter.E
