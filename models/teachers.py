from sqlalchemy import Column, Integer, String, Boolean, Date
from database.db import Base

class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)              # 교사 고유 ID (PK)
    teacher_code = Column(String(50), unique=True, nullable=False)  # 교직원 번호 (예: TSC-1024)
    fullname = Column(String(200), nullable=False)                  # 교사 이름
    email = Column(String(100), unique=True)                        # 이메일
    phone_number = Column(String(20))                               # 전화번호
    specialization = Column(String(100))                            # 전공/담당 분야
    employment_date = Column(Date)                                  # 임용일
    is_active = Column(Boolean, default=True, nullable=False)       # 재직 여부 (소프트 삭제)
