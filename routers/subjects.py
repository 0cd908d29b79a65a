from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.subjects import Subject as SubjectModel
from schemas.subjects import Subject as SubjectSchema, SubjectCreate

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _get_subject_or_404(db: Session, subject_id: int) -> SubjectModel:
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


# ✅ [CREATE] 과목 추가
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_subject(subject: SubjectCreate, db: Session = Depends(get_db)):
    if db.query(SubjectModel).filter(SubjectModel.subject_code == subject.subject_code).first():
        raise HTTPException(status_code=409, detail="Subject code already exists")

    db_subject = SubjectModel(**subject.model_dump())
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(db_subject).model_dump(),
        "message": "Subject created successfully"
    }


# ✅ [READ] 과목 목록 (분류 필터 선택)
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_subjects(subject_type: str = None, db: Session = Depends(get_db)):
    query = db.query(SubjectModel).filter(SubjectModel.is_active.is_(True))
    if subject_type:
        query = query.filter(SubjectModel.subject_type == subject_type)
    records = query.order_by(SubjectModel.subject_name).all()
    return {"success": True, "data": [SubjectSchema.model_validate(r).model_dump() for r in records]}


# ✅ [READ] 과목 상세
@router.get("/{subject_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = _get_subject_or_404(db, subject_id)
    return {"success": True, "data": SubjectSchema.model_validate(subject).model_dump()}


# ✅ [UPDATE] 과목 수정
@router.put("/{subject_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_subject(subject_id: int, updated: SubjectCreate, db: Session = Depends(get_db)):
    subject = _get_subject_or_404(db, subject_id)
    for key, value in updated.model_dump().items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(subject).model_dump(),
        "message": "Subject updated successfully"
    }


# ✅ [DELETE] 과목 비활성화
@router.delete("/{subject_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = _get_subject_or_404(db, subject_id)
    subject.is_active = False
    db.commit()
    return {"success": True, "data": {"subject_id": subject_id}, "message": "Subject deactivated successfully"}
