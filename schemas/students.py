from datetime import date
from pydantic import BaseModel
from typing import Optional

# ✅ 입력용 (POST/PUT 등)
class StudentCreate(BaseModel):
    admission_number: str                    # 입학 번호
    fullname: str                            # 학생 이름
    class_id: int                            # 소속 학급 ID
    stream_id: int                           # 소속 분반 ID
    date_of_birth: Optional[date] = None     # 생년월일
    gender: Optional[str] = None             # 성별 (male / female / other)
    class_teacher_id: Optional[int] = None   # 담임 교사 ID
    guardian_phone: Optional[str] = None     # 보호자 연락처

# ✅ 전체 출력용 (GET, 상세조회 등)
class Student(StudentCreate):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True  # Pydantic v2 기준
