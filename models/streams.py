from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from database.db import Base

class Stream(Base):
    __tablename__ = "streams"  # 학급 내 분반 (예: Form 2 East / West)

    id = Column(Integer, primary_key=True, index=True)                  # 분반 고유 ID (PK)
    stream_name = Column(String(50), nullable=False)                    # 분반 이름
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)  # 소속 학급 ID
    is_active = Column(Boolean, default=True, nullable=False)           # 사용 여부 (소프트 삭제)
