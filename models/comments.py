from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, func
from database.db import Base

class Comment(Base):
    __tablename__ = "comments"  # 학생별 학기 코멘트 (교장/담임/교과/생활)
    __table_args__ = (
        Index("ix_comments_student_term", "student_id", "term_id"),
    )

    id = Column(Integer, primary_key=True, index=True)                                      # 코멘트 고유 ID
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)                 # 작성 교사
    term_id = Column(Integer, ForeignKey("terms.id", ondelete="CASCADE"), nullable=False)
    comment_text = Column(Text, nullable=False)                                             # 본문
    comment_type = Column(String(20), nullable=False, default="general", index=True)        # academic / behavioral / general / recommendation
    is_visible_to_parent = Column(Boolean, default=False, nullable=False)                   # 학부모 공개 여부
    created_at = Column(DateTime, server_default=func.now())                                # 작성 시각
