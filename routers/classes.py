from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.classes import Class as ClassModel
from models.streams import Stream as StreamModel
from schemas.classes import Class as ClassSchema, ClassCreate
from schemas.streams import Stream as StreamSchema

router = APIRouter(prefix="/classes", tags=["classes"])


def _get_class_or_404(db: Session, class_id: int) -> ClassModel:
    class_obj = db.query(ClassModel).filter(ClassModel.id == class_id).first()
    if class_obj is None:
        raise HTTPException(status_code=404, detail="Class not found")
    return class_obj


# ✅ [CREATE] 학급 추가
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_class(class_data: ClassCreate, db: Session = Depends(get_db)):
    if db.query(ClassModel).filter(ClassModel.class_name == class_data.class_name).first():
        raise HTTPException(status_code=409, detail="Class name already exists")

    db_class = ClassModel(**class_data.model_dump())
    db.add(db_class)
    db.commit()
    db.refresh(db_class)
    return {
        "success": True,
        "data": ClassSchema.model_validate(db_class).model_dump(),
        "message": "Class created successfully"
    }


# ✅ [READ] 학급 목록 (학년 단계 순)
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_classes(db: Session = Depends(get_db)):
    records = (
        db.query(ClassModel)
        .filter(ClassModel.is_active.is_(True))
        .order_by(ClassModel.class_level, ClassModel.class_name)
        .all()
    )
    return {"success": True, "data": [ClassSchema.model_validate(r).model_dump() for r in records]}


# ✅ [READ] 학급 상세 + 소속 분반
@router.get("/{class_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_class(class_id: int, db: Session = Depends(get_db)):
    class_obj = _get_class_or_404(db, class_id)
    streams = (
        db.query(StreamModel)
        .filter(StreamModel.class_id == class_id, StreamModel.is_active.is_(True))
        .order_by(StreamModel.stream_name)
        .all()
    )
    data = ClassSchema.model_validate(class_obj).model_dump()
    data["streams"] = [StreamSchema.model_validate(s).model_dump() for s in streams]
    return {"success": True, "data": data}


# ✅ [UPDATE] 학급 수정
@router.put("/{class_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_class(class_id: int, updated: ClassCreate, db: Session = Depends(get_db)):
    class_obj = _get_class_or_404(db, class_id)
    for key, value in updated.model_dump().items():
        setattr(class_obj, key, value)
    db.commit()
    db.refresh(class_obj)
    return {
        "success": True,
        "data": ClassSchema.model_validate(class_obj).model_dump(),
        "message": "Class updated successfully"
    }


# ✅ [DELETE] 학급 비활성화
@router.delete("/{class_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_class(class_id: int, db: Session = Depends(get_db)):
    class_obj = _get_class_or_404(db, class_id)
    class_obj.is_active = False
    db.commit()
    return {"success": True, "data": {"class_id": class_id}, "message": "Class deactivated successfully"}
