from pydantic import BaseModel

# ✅ 생성(Create) 요청용 스키마
# → id는 DB에서 자동 생성되므로 제외
class ClassCreate(BaseModel):
    class_name: str                  # 학급명 (예: Form 1)
    class_level: int                 # 학년 단계


# ✅ 응답(Response) / 조회(Read) 용 스키마
class Class(ClassCreate):
    id: int                          # 학급 고유 ID (PK)
    is_active: bool = True

    class Config:
        # Pydantic v2에서는 orm_mode 대신 from_attributes 사용
        from_attributes = True
