from sqlalchemy import Column, Integer, String, Boolean
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 과목 고유 ID (Primary Key)
    subject_name = Column(String(100), nullable=False)                  # 과목 이름 (예: Mathematics)
    subject_code = Column(String(20), unique=True, nullable=False)      # 과목 코드 (예: MAT)
    subject_type = Column(String(20), nullable=False, default="core")   # 과목 분류 (core / elective)
    is_active = Column(Boolean, default=True, nullable=False)           # 사용 여부
