from sqlalchemy import Column, Integer, String, Boolean
from database.db import Base

class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)              # 학급 고유 ID (PK)
    class_name = Column(String(50), unique=True, nullable=False)    # 학급명 (예: Form 2)
    class_level = Column(Integer, nullable=False)                   # 학년 단계 (예: 1 ~ 4)
    is_active = Column(Boolean, default=True, nullable=False)       # 사용 여부
