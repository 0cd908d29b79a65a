from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import STAFF_ROLES, CurrentUser, require_roles
from models.comments import Comment as CommentModel
from models.students import Student as StudentModel
from schemas.comments import Comment as CommentSchema, CommentCreate

router = APIRouter(prefix="/comments", tags=["comments"])


# ✅ [CREATE] 코멘트 작성 (교사 ID 필요)
@router.post("/", status_code=201)
def create_comment(
    comment: CommentCreate,
    user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
    db: Session = Depends(get_db),
):
    if user.teacher_id is None:
        raise HTTPException(status_code=403, detail="Teacher profile not found")
    if not db.query(StudentModel).filter(StudentModel.id == comment.student_id).first():
        raise HTTPException(status_code=404, detail="Student not found")

    db_comment = CommentModel(**comment.model_dump(mode="json"), teacher_id=user.teacher_id)
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return {
        "success": True,
        "data": CommentSchema.model_validate(db_comment).model_dump(),
        "message": "Comment created successfully"
    }


# ✅ [READ] 학생의 학기 코멘트 목록 (작성 순)
@router.get("/student/{student_id}/term/{term_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_student_comments(student_id: int, term_id: int, db: Session = Depends(get_db)):
    records = (
        db.query(CommentModel)
        .filter(CommentModel.student_id == student_id, CommentModel.term_id == term_id)
        .order_by(CommentModel.created_at, CommentModel.id)
        .all()
    )
    return {"success": True, "data": [CommentSchema.model_validate(r).model_dump() for r in records]}


# ✅ [DELETE] 본인 코멘트 삭제
@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    user: CurrentUser = Depends(require_roles(*STAFF_ROLES)),
    db: Session = Depends(get_db),
):
    comment = db.query(CommentModel).filter(CommentModel.id == comment_id).first()
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    if user.role == "teacher" and comment.teacher_id != user.teacher_id:
        raise HTTPException(status_code=403, detail="You can only delete your own comments")

    db.delete(comment)
    db.commit()
    return {"success": True, "data": {"comment_id": comment_id}, "message": "Comment deleted successfully"}
