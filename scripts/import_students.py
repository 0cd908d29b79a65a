import csv
from datetime import date
from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.students import Student as StudentModel  # ✅ 모델 import

CSV_PATH = "data/students.csv"  # ✅ 파일 경로


def migrate_students(csv_path: str = CSV_PATH, db: Session = None) -> int:
    """입학번호 기준으로 이미 있는 학생은 건너뜀. 추가된 학생 수 반환"""
    own_session = db is None
    db = db or SessionLocal()
    added = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                exists = db.query(StudentModel).filter(
                    StudentModel.admission_number == row["admission_number"]
                ).first()
                if exists:
                    continue
                student = StudentModel(
                    admission_number=row["admission_number"],                  # 입학 번호
                    fullname=row["fullname"],                                  # 학생 이름
                    class_id=int(row["class_id"]),                             # 소속 학급 ID
                    stream_id=int(row["stream_id"]),                           # 소속 분반 ID
                    gender=row.get("gender") or None,                          # 성별
                    date_of_birth=date.fromisoformat(row["date_of_birth"]) if row.get("date_of_birth") else None,
                    guardian_phone=row.get("guardian_phone") or None           # 보호자 연락처
                )
                db.add(student)
                added += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()

    print(f"✅ 학생 정보 CSV → DB 마이그레이션 완료 ({added}명)")
    return added


if __name__ == "__main__":
    migrate_students()
