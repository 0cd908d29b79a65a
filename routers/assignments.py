from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.assignments import Assignment as AssignmentModel
from models.classes import Class as ClassModel
from models.streams import Stream as StreamModel
from models.subjects import Subject as SubjectModel
from models.teachers import Teacher as TeacherModel
from models.terms import Term as TermModel
from schemas.assignments import Assignment as AssignmentSchema, AssignmentCreate

router = APIRouter(prefix="/assignments", tags=["assignments"])


# ✅ [CREATE] 교사 배정 (참조 대상 존재/분반-학급 일치 확인)
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_assignment(assignment: AssignmentCreate, db: Session = Depends(get_db)):
    checks = [
        (TeacherModel, assignment.teacher_id, "Teacher"),
        (SubjectModel, assignment.subject_id, "Subject"),
        (ClassModel, assignment.class_id, "Class"),
        (TermModel, assignment.term_id, "Term"),
    ]
    for model, pk, label in checks:
        if not db.query(model).filter(model.id == pk).first():
            raise HTTPException(status_code=404, detail=f"{label} not found")

    stream = db.query(StreamModel).filter(StreamModel.id == assignment.stream_id).first()
    if stream is None or stream.class_id != assignment.class_id:
        raise HTTPException(status_code=400, detail="Stream does not belong to the given class")

    duplicate = db.query(AssignmentModel).filter_by(**assignment.model_dump()).first()
    if duplicate:
        raise HTTPException(status_code=409, detail="Assignment already exists")

    db_assignment = AssignmentModel(**assignment.model_dump())
    db.add(db_assignment)
    db.commit()
    db.refresh(db_assignment)
    return {
        "success": True,
        "data": AssignmentSchema.model_validate(db_assignment).model_dump(),
        "message": "Assignment created successfully"
    }


# ✅ [READ] 배정 목록 (학급/분반/학기/학년도 필터)
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_assignments(
    class_id: int = None,
    stream_id: int = None,
    term_id: int = None,
    academic_year: str = None,
    db: Session = Depends(get_db),
):
    query = db.query(AssignmentModel).filter(AssignmentModel.is_active.is_(True))
    if class_id:
        query = query.filter(AssignmentModel.class_id == class_id)
    if stream_id:
        query = query.filter(AssignmentModel.stream_id == stream_id)
    if term_id:
        query = query.filter(AssignmentModel.term_id == term_id)
    if academic_year:
        query = query.filter(AssignmentModel.academic_year == academic_year)
    records = query.order_by(AssignmentModel.id).all()
    return {"success": True, "data": [AssignmentSchema.model_validate(r).model_dump() for r in records]}


# ✅ [DELETE] 배정 해제 (기존 점수 보존을 위해 비활성화)
@router.delete("/{assignment_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_assignment(assignment_id: int, db: Session = Depends(get_db)):
    assignment = db.query(AssignmentModel).filter(AssignmentModel.id == assignment_id).first()
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    assignment.is_active = False
    db.commit()
    return {
        "success": True,
        "data": {"assignment_id": assignment_id},
        "message": "Assignment deactivated successfully"
    }
