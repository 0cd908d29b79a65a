from pydantic import BaseModel
from typing import Literal

# ✅ 입력용: POST 요청에서 사용할 스키마
class SubjectCreate(BaseModel):
    subject_name: str                                # 과목 이름
    subject_code: str                                # 과목 코드
    subject_type: Literal["core", "elective"] = "core"

# ✅ 출력용: GET, POST 응답 등에서 사용할 스키마
class Subject(SubjectCreate):
    id: int                                          # 고유 과목 ID
    is_active: bool = True

    class Config:
        from_attributes = True                       # orm_mode → 최신 Pydantic 문법
