from pydantic import BaseModel

from schemas.results import CommentType

class CommentCreate(BaseModel):
    student_id: int
    term_id: int
    comment_text: str
    comment_type: CommentType = CommentType.GENERAL
    is_visible_to_parent: bool = False


class Comment(CommentCreate):
    id: int
    teacher_id: int

    class Config:
        from_attributes = True
