from pydantic import BaseModel

class StreamCreate(BaseModel):
    stream_name: str                 # 분반 이름 (예: East)
    class_id: int                    # 소속 학급 ID


class Stream(StreamCreate):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True
