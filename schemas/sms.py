from pydantic import BaseModel, Field
from typing import List, Optional

class SingleSMSRequest(BaseModel):
    phone: str
    message: str = Field(..., min_length=1)


class BulkSMSRequest(BaseModel):
    message: str = Field(..., min_length=1)
    phones: Optional[List[str]] = None       # 직접 지정
    class_id: Optional[int] = None           # 또는 학급/분반 보호자 전체
    stream_id: Optional[int] = None


class ResultsSMSRequest(BaseModel):
    class_id: int
    term_id: int
    stream_id: Optional[int] = None


class AttendanceSMSRequest(BaseModel):
    class_id: int
    message: str = Field(..., min_length=1, description="[name] 은 학생 이름으로 치환")
    stream_id: Optional[int] = None


class EmergencySMSRequest(BaseModel):
    message: str = Field(..., min_length=1)
