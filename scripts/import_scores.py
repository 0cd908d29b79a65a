import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from services.score_store import ScoreKey, upsert_score  # ✅ 자연키 upsert 재사용

CSV_PATH = "data/scores.csv"  # ✅ 파일 경로 (assignment_id, student_id, term_id, score, submitted_by)


def migrate_scores(csv_path: str = CSV_PATH, db: Session = None) -> int:
    """
    점수 CSV 일괄 반영
    - 같은 (배정, 학생, 학기) 행이 이미 있으면 점수만 교체
    - 0~100 범위를 벗어난 행이 하나라도 있으면 전체 롤백
    """
    own_session = db is None
    db = db or SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                key = ScoreKey(
                    assignment_id=int(row["assignment_id"]),
                    student_id=int(row["student_id"]),
                    term_id=int(row["term_id"]),
                )
                upsert_score(db, key, row["score"], int(row["submitted_by"]))
                count += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()

    print(f"✅ 점수 CSV → DB 반영 완료 ({count}건)")
    return count


if __name__ == "__main__":
    migrate_scores()
