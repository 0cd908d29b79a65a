from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.teachers import Teacher as TeacherModel
from models.assignments import Assignment as AssignmentModel
from models.subjects import Subject as SubjectModel
from schemas.teachers import Teacher as TeacherSchema, TeacherCreate

router = APIRouter(prefix="/teachers", tags=["teachers"])


def _get_teacher_or_404(db: Session, teacher_id: int) -> TeacherModel:
    teacher = db.query(TeacherModel).filter(TeacherModel.id == teacher_id).first()
    if teacher is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return teacher


# ✅ [CREATE] 교사 등록
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_teacher(teacher: TeacherCreate, db: Session = Depends(get_db)):
    if db.query(TeacherModel).filter(TeacherModel.teacher_code == teacher.teacher_code).first():
        raise HTTPException(status_code=409, detail="Teacher code already exists")

    db_teacher = TeacherModel(**teacher.model_dump())
    db.add(db_teacher)
    db.commit()
    db.refresh(db_teacher)
    return {
        "success": True,
        "data": TeacherSchema.model_validate(db_teacher).model_dump(),
        "message": "Teacher created successfully"
    }


# ✅ [READ] 재직 교사 전체 조회
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_teachers(db: Session = Depends(get_db)):
    records = db.query(TeacherModel).filter(TeacherModel.is_active.is_(True)).order_by(TeacherModel.fullname).all()
    return {
        "success": True,
        "data": [TeacherSchema.model_validate(r).model_dump() for r in records],
        "count": len(records)
    }


# ✅ [READ] 교사별 담당 배정 (과목/학급/분반)
@router.get("/{teacher_id}/assignments", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def get_teacher_assignments(teacher_id: int, academic_year: str = None, term_id: int = None, db: Session = Depends(get_db)):
    _get_teacher_or_404(db, teacher_id)
    query = (
        db.query(AssignmentModel, SubjectModel)
        .join(SubjectModel, SubjectModel.id == AssignmentModel.subject_id)
        .filter(AssignmentModel.teacher_id == teacher_id, AssignmentModel.is_active.is_(True))
    )
    if academic_year:
        query = query.filter(AssignmentModel.academic_year == academic_year)
    if term_id:
        query = query.filter(AssignmentModel.term_id == term_id)

    return {
        "success": True,
        "data": [
            {
                "assignment_id": a.id,
                "subject_id": s.id,
                "subject_name": s.subject_name,
                "class_id": a.class_id,
                "stream_id": a.stream_id,
                "academic_year": a.academic_year,
                "term_id": a.term_id
            }
            for a, s in query.order_by(SubjectModel.subject_name).all()
        ]
    }


# ✅ [READ] 특정 교사 상세 조회
@router.get("/{teacher_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_teacher(teacher_id: int, db: Session = Depends(get_db)):
    teacher = _get_teacher_or_404(db, teacher_id)
    return {"success": True, "data": TeacherSchema.model_validate(teacher).model_dump()}


# ✅ [UPDATE] 교사 정보 수정
@router.put("/{teacher_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_teacher(teacher_id: int, updated: TeacherCreate, db: Session = Depends(get_db)):
    teacher = _get_teacher_or_404(db, teacher_id)
    for key, value in updated.model_dump().items():
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    return {
        "success": True,
        "data": TeacherSchema.model_validate(teacher).model_dump(),
        "message": "Teacher updated successfully"
    }


# ✅ [DELETE] 교사 비활성화
@router.delete("/{teacher_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_teacher(teacher_id: int, db: Session = Depends(get_db)):
    teacher = _get_teacher_or_404(db, teacher_id)
    teacher.is_active = False
    db.commit()
    return {"success": True, "data": {"teacher_id": teacher_id}, "message": "Teacher deactivated successfully"}
