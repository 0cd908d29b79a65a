from pydantic import BaseModel

# ✅ 교사-과목-학급-분반-학기 배정
class AssignmentCreate(BaseModel):
    teacher_id: int
    subject_id: int
    class_id: int
    stream_id: int
    academic_year: str
    term_id: int


class Assignment(AssignmentCreate):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True
