"""
services/results/ranking.py

석차 산정 (competition ranking)
- 평균 내림차순, 동점자는 같은 석차, 다음 석차는 동점자 수만큼 건너뜀
  예) 평균 [90, 90, 80, 70] → 석차 [1, 1, 3, 4]
- 동점자 사이 순서는 입력 순서 유지 (stable sort)
- class_rank : 입력 전체 기준
- stream_rank: 입력을 stream_id 별로 나눈 뒤 각 분반 안에서 같은 방식으로 산정
- 입력이 한 학급/학기/학년도 코호트인지 검증하지 않음 (호출 측 책임)
"""

from collections import OrderedDict
from typing import Iterable, List, Sequence

from schemas.results import RankedAggregate, StudentAggregate


def competition_ranks(keys: Sequence) -> List[int]:
    """내림차순으로 정렬된 키 목록에 대한 석차 목록"""
    ranks = []
    rank, skip, previous = 1, 0, None
    for key in keys:
        if previous is not None and key < previous:
            rank += 1 + skip
            skip = 0
        elif previous is not None and key == previous:
            skip += 1
        ranks.append(rank)
        previous = key
    return ranks


def rank_cohort(aggregates: Iterable[StudentAggregate]) -> List[RankedAggregate]:
    ordered = sorted(aggregates, key=lambda a: a.average_score, reverse=True)
    class_ranks = competition_ranks([a.average_score for a in ordered])

    # 분반별 인덱스 (정렬 순서 유지)
    by_stream = OrderedDict()
    for idx, aggregate in enumerate(ordered):
        by_stream.setdefault(aggregate.stream_id, []).append(idx)

    stream_ranks = [0] * len(ordered)
    for indexes in by_stream.values():
        ranks = competition_ranks([ordered[i].average_score for i in indexes])
        for i, rank in zip(indexes, ranks):
            stream_ranks[i] = rank

    return [
        RankedAggregate.model_validate({**dict(aggregate), "class_rank": class_rank, "stream_rank": stream_rank})
        for aggregate, class_rank, stream_rank in zip(ordered, class_ranks, stream_ranks)
    ]
