from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Index, func
from database.db import Base

class Assignment(Base):
    __tablename__ = "assignments"  # 교사-과목-학급-분반 배정 테이블
    __table_args__ = (
        # 같은 학년도/학기에 동일 배정 중복 금지
        UniqueConstraint(
            "teacher_id", "subject_id", "class_id", "stream_id", "academic_year", "term_id",
            name="uq_assignments_scope",
        ),
        Index("ix_assignments_teacher_year_term", "teacher_id", "academic_year", "term_id"),
        Index("ix_assignments_class_stream_year", "class_id", "stream_id", "academic_year"),
    )

    id = Column(Integer, primary_key=True, index=True)                      # 배정 고유 ID (PK)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False) # 담당 교사
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False) # 과목
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)    # 학급
    stream_id = Column(Integer, ForeignKey("streams.id"), nullable=False)   # 분반
    academic_year = Column(String(10), nullable=False)                      # 학년도
    term_id = Column(Integer, ForeignKey("terms.id"), nullable=False)       # 학기
    is_active = Column(Boolean, default=True, nullable=False)               # 사용 여부
    assigned_date = Column(DateTime, server_default=func.now())             # 배정 일시
