from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                      # 고유 학생 ID (Primary Key)
    admission_number = Column(String(50), unique=True, nullable=False)      # 입학 번호
    fullname = Column(String(200), nullable=False)                          # 학생 이름
    date_of_birth = Column(Date)                                            # 생년월일
    gender = Column(String(10))                                             # 성별 (male / female / other)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)    # 소속 학급 ID
    stream_id = Column(Integer, ForeignKey("streams.id"), nullable=False)   # 소속 분반 ID
    class_teacher_id = Column(Integer, ForeignKey("teachers.id"))           # 담임 교사 ID
    guardian_phone = Column(String(20))                                     # 보호자 연락처 (SMS 발송용)
    is_active = Column(Boolean, default=True, nullable=False)               # 재학 여부
