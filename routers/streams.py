from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.classes import Class as ClassModel
from models.streams import Stream as StreamModel
from schemas.streams import Stream as StreamSchema, StreamCreate

router = APIRouter(prefix="/streams", tags=["streams"])


def _get_stream_or_404(db: Session, stream_id: int) -> StreamModel:
    stream = db.query(StreamModel).filter(StreamModel.id == stream_id).first()
    if stream is None:
        raise HTTPException(status_code=404, detail="Stream not found")
    return stream


# ✅ [CREATE] 분반 추가
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_stream(stream: StreamCreate, db: Session = Depends(get_db)):
    if not db.query(ClassModel).filter(ClassModel.id == stream.class_id).first():
        raise HTTPException(status_code=404, detail="Class not found")

    db_stream = StreamModel(**stream.model_dump())
    db.add(db_stream)
    db.commit()
    db.refresh(db_stream)
    return {
        "success": True,
        "data": StreamSchema.model_validate(db_stream).model_dump(),
        "message": "Stream created successfully"
    }


# ✅ [READ] 분반 목록 (학급 필터 선택)
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_streams(class_id: int = None, db: Session = Depends(get_db)):
    query = db.query(StreamModel).filter(StreamModel.is_active.is_(True))
    if class_id:
        query = query.filter(StreamModel.class_id == class_id)
    records = query.order_by(StreamModel.stream_name).all()
    return {"success": True, "data": [StreamSchema.model_validate(r).model_dump() for r in records]}


# ✅ [UPDATE] 분반 수정
@router.put("/{stream_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_stream(stream_id: int, updated: StreamCreate, db: Session = Depends(get_db)):
    stream = _get_stream_or_404(db, stream_id)
    for key, value in updated.model_dump().items():
        setattr(stream, key, value)
    db.commit()
    db.refresh(stream)
    return {
        "success": True,
        "data": StreamSchema.model_validate(stream).model_dump(),
        "message": "Stream updated successfully"
    }


# ✅ [DELETE] 분반 비활성화
@router.delete("/{stream_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_stream(stream_id: int, db: Session = Depends(get_db)):
    stream = _get_stream_or_404(db, stream_id)
    stream.is_active = False
    db.commit()
    return {"success": True, "data": {"stream_id": stream_id}, "message": "Stream deactivated successfully"}
