from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint, Index, func
from database.db import Base

class Score(Base):
    __tablename__ = "scores"  # 과목별 점수 원장
    __table_args__ = (
        # ✅ 자연키: (배정, 학생, 학기) 당 점수는 하나
        UniqueConstraint("assignment_id", "student_id", "term_id", name="uq_scores_natural_key"),
        Index("ix_scores_student_term", "student_id", "term_id"),
    )

    id = Column(Integer, primary_key=True, index=True)                              # 점수 고유 ID (PK)
    score = Column(Numeric(5, 2), nullable=False)                                   # 점수 (0 ~ 100)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False, index=True)  # 배정 (과목/학급/분반/교사)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)         # 학생 ID
    term_id = Column(Integer, ForeignKey("terms.id"), nullable=False)               # 학기 ID
    submitted_by = Column(Integer, ForeignKey("teachers.id"), nullable=False)       # 제출 교사 ID
    created_at = Column(DateTime, server_default=func.now())                        # 최초 제출 시각
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())   # 마지막 수정 시각
