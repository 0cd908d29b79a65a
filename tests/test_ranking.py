from decimal import Decimal

from schemas.results import StudentAggregate
from services.results.ranking import competition_ranks, rank_cohort


def _agg(student_id, average, stream_id=1):
    return StudentAggregate(
        student_id=student_id,
        term_id=1,
        stream_id=stream_id,
        average_score=Decimal(str(average)),
        subject_count=1,
    )


def test_competition_ranking_with_ties():
    ranked = rank_cohort([_agg(1, 90), _agg(2, 90), _agg(3, 80), _agg(4, 70)])
    assert [r.class_rank for r in ranked] == [1, 1, 3, 4]


def test_single_and_empty_cohorts():
    assert [r.class_rank for r in rank_cohort([_agg(1, 50)])] == [1]
    assert rank_cohort([]) == []


def test_sorted_descending_and_ties_keep_input_order():
    ranked = rank_cohort([_agg(1, 70), _agg(2, 90), _agg(3, 80), _agg(4, 90)])
    assert [r.student_id for r in ranked] == [2, 4, 3, 1]
    assert [r.class_rank for r in ranked] == [1, 1, 3, 4]


def test_triple_tie_skips_ranks():
    assert competition_ranks([9, 9, 9, 5, 5, 1]) == [1, 1, 1, 4, 4, 6]


def test_stream_rank_is_computed_within_each_stream():
    cohort = [
        _agg(1, 60, stream_id=1),
        _agg(2, 90, stream_id=1),
        _agg(3, 90, stream_id=2),
        _agg(4, 70, stream_id=2),
        _agg(5, 0, stream_id=2),
    ]
    ranked = {r.student_id: r for r in rank_cohort(cohort)}

    assert {sid: r.class_rank for sid, r in ranked.items()} == {2: 1, 3: 1, 4: 3, 1: 4, 5: 5}
    assert {sid: r.stream_rank for sid, r in ranked.items()} == {2: 1, 1: 2, 3: 1, 4: 2, 5: 3}


def test_single_stream_cohort_stream_rank_equals_class_rank():
    ranked = rank_cohort([_agg(1, 90), _agg(2, 90), _agg(3, 80)])
    assert all(r.class_rank == r.stream_rank for r in ranked)


def test_ranking_does_not_mutate_input():
    cohort = [_agg(1, 70), _agg(2, 90)]
    before = [a.model_dump() for a in cohort]
    rank_cohort(cohort)
    assert [a.model_dump() for a in cohort] == before


def test_reranking_ranked_output_is_stable():
    ranked = rank_cohort([_agg(1, 90), _agg(2, 80)])
    again = rank_cohort(ranked)
    assert [(r.student_id, r.class_rank) for r in again] == [(1, 1), (2, 2)]
