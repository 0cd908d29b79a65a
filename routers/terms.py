from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.terms import Term as TermModel
from schemas.terms import Term as TermSchema, TermCreate

router = APIRouter(prefix="/terms", tags=["terms"])


def _get_term_or_404(db: Session, term_id: int) -> TermModel:
    term = db.query(TermModel).filter(TermModel.id == term_id).first()
    if term is None:
        raise HTTPException(status_code=404, detail="Term not found")
    return term


# ✅ [CREATE] 학기 추가
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_term(term: TermCreate, db: Session = Depends(get_db)):
    duplicate = (
        db.query(TermModel)
        .filter(TermModel.term_number == term.term_number, TermModel.academic_year == term.academic_year)
        .first()
    )
    if duplicate:
        raise HTTPException(status_code=409, detail="Term already exists for this academic year")

    db_term = TermModel(**term.model_dump())
    db.add(db_term)
    db.commit()
    db.refresh(db_term)
    return {
        "success": True,
        "data": TermSchema.model_validate(db_term).model_dump(),
        "message": "Term created successfully"
    }


# ✅ [READ] 학기 목록 (학년도 필터 선택, 최신순)
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_terms(academic_year: str = None, db: Session = Depends(get_db)):
    query = db.query(TermModel)
    if academic_year:
        query = query.filter(TermModel.academic_year == academic_year)
    records = query.order_by(TermModel.academic_year.desc(), TermModel.term_number).all()
    return {"success": True, "data": [TermSchema.model_validate(r).model_dump() for r in records]}


# ✅ [READ] 오늘 날짜가 포함된 현재 학기
@router.get("/current", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_current_term(db: Session = Depends(get_db)):
    today = date.today()
    term = (
        db.query(TermModel)
        .filter(TermModel.is_active.is_(True), TermModel.start_date <= today, TermModel.end_date >= today)
        .first()
    )
    if term is None:
        raise HTTPException(status_code=404, detail="No active term for today")
    return {"success": True, "data": TermSchema.model_validate(term).model_dump()}


# ✅ [READ] 학기 상세
@router.get("/{term_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_term(term_id: int, db: Session = Depends(get_db)):
    term = _get_term_or_404(db, term_id)
    return {"success": True, "data": TermSchema.model_validate(term).model_dump()}


# ✅ [UPDATE] 학기 수정
@router.put("/{term_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_term(term_id: int, updated: TermCreate, db: Session = Depends(get_db)):
    term = _get_term_or_404(db, term_id)
    for key, value in updated.model_dump().items():
        setattr(term, key, value)
    db.commit()
    db.refresh(term)
    return {
        "success": True,
        "data": TermSchema.model_validate(term).model_dump(),
        "message": "Term updated successfully"
    }


# ✅ [DELETE] 학기 비활성화
@router.delete("/{term_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_term(term_id: int, db: Session = Depends(get_db)):
    term = _get_term_or_404(db, term_id)
    term.is_active = False
    db.commit()
    return {"success": True, "data": {"term_id": term_id}, "message": "Term deactivated successfully"}
