from sqlalchemy import Column, Integer, String, Boolean, Date, UniqueConstraint
from database.db import Base

class Term(Base):
    __tablename__ = "terms"  # 학기 정보 테이블
    __table_args__ = (
        # 학년도별 학기 번호는 하나만 존재
        UniqueConstraint("term_number", "academic_year", name="uq_terms_number_year"),
    )

    id = Column(Integer, primary_key=True, index=True)          # 학기 고유 ID (PK)
    term_name = Column(String(50), nullable=False)              # 학기명 (Term 1 / Term 2 / Term 3)
    term_number = Column(Integer, nullable=False)               # 정렬용 학기 번호 (1 ~ 3)
    academic_year = Column(String(10), nullable=False)          # 학년도 (예: "2024")
    start_date = Column(Date, nullable=False)                   # 시작일
    end_date = Column(Date, nullable=False)                     # 종료일
    is_active = Column(Boolean, default=True, nullable=False)   # 사용 여부
