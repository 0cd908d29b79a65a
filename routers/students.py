from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.students import Student as StudentModel
from schemas.students import Student as StudentSchema, StudentCreate

router = APIRouter(prefix="/students", tags=["students"])


def _get_student_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학생 등록
@router.post("/", status_code=201, dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    exists = db.query(StudentModel).filter(StudentModel.admission_number == student.admission_number).first()
    if exists:
        raise HTTPException(status_code=409, detail="Admission number already exists")

    db_student = StudentModel(**student.model_dump())
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    return {
        "success": True,
        "data": StudentSchema.model_validate(db_student).model_dump(),
        "message": "Student created successfully"
    }


# ✅ [READ] 재학생 전체 조회
@router.get("/", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_students(db: Session = Depends(get_db)):
    records = (
        db.query(StudentModel)
        .filter(StudentModel.is_active.is_(True))
        .order_by(StudentModel.fullname)
        .all()
    )
    return {
        "success": True,
        "data": [StudentSchema.model_validate(r).model_dump() for r in records],
        "count": len(records)
    }


# ==========================================================
# [2단계] 정적 라우터 (검색/통계)
# ==========================================================

# ✅ [SEARCH] 이름/입학번호로 학생 검색
@router.get("/search", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def search_students(q: str, db: Session = Depends(get_db)):
    results = (
        db.query(StudentModel)
        .filter(
            StudentModel.is_active.is_(True),
            (StudentModel.fullname.contains(q)) | (StudentModel.admission_number.contains(q)),
        )
        .order_by(StudentModel.fullname)
        .all()
    )
    return {
        "success": True,
        "data": [StudentSchema.model_validate(r).model_dump() for r in results],
        "count": len(results)
    }


# ✅ [SUMMARY] 학급/분반별 재학생 수
@router.get("/summary", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def student_summary(db: Session = Depends(get_db)):
    rows = (
        db.query(StudentModel.class_id, StudentModel.stream_id, func.count(StudentModel.id))
        .filter(StudentModel.is_active.is_(True))
        .group_by(StudentModel.class_id, StudentModel.stream_id)
        .all()
    )
    return {
        "success": True,
        "data": {
            "total_students": sum(cnt for _, _, cnt in rows),
            "by_class_stream": [
                {"class_id": c, "stream_id": s, "count": cnt} for c, s, cnt in rows
            ]
        }
    }


# ✅ [READ] 특정 학급(+분반)의 학생 목록
@router.get("/class/{class_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def get_students_by_class(class_id: int, stream_id: int = None, db: Session = Depends(get_db)):
    query = db.query(StudentModel).filter(StudentModel.class_id == class_id, StudentModel.is_active.is_(True))
    if stream_id:
        query = query.filter(StudentModel.stream_id == stream_id)
    students = query.order_by(StudentModel.fullname).all()
    return {
        "success": True,
        "data": [StudentSchema.model_validate(s).model_dump() for s in students],
        "count": len(students)
    }


# ==========================================================
# [3단계] 완전 동적 라우터 (개별 조회/수정/삭제)
# ==========================================================

# ✅ [READ] 특정 학생 상세 조회
@router.get("/{student_id}", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def read_student(student_id: int, db: Session = Depends(get_db)):
    student = _get_student_or_404(db, student_id)
    return {"success": True, "data": StudentSchema.model_validate(student).model_dump()}


# ✅ [UPDATE] 학생 정보 수정
@router.put("/{student_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def update_student(student_id: int, updated: StudentCreate, db: Session = Depends(get_db)):
    student = _get_student_or_404(db, student_id)
    for key, value in updated.model_dump().items():
        setattr(student, key, value)
    db.commit()
    db.refresh(student)
    return {
        "success": True,
        "data": StudentSchema.model_validate(student).model_dump(),
        "message": "Student updated successfully"
    }


# ✅ [DELETE] 학생 비활성화 (점수 기록 보존을 위해 소프트 삭제)
@router.delete("/{student_id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def deactivate_student(student_id: int, db: Session = Depends(get_db)):
    student = _get_student_or_404(db, student_id)
    student.is_active = False
    db.commit()
    return {
        "success": True,
        "data": {"student_id": student_id},
        "message": "Student deactivated successfully"
    }
