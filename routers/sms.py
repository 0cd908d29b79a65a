import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from config.settings import settings
from database.db import get_db
from dependencies.security import ADMIN_ROLES, STAFF_ROLES, require_roles
from models.students import Student as StudentModel
from schemas.sms import (
    AttendanceSMSRequest,
    BulkSMSRequest,
    EmergencySMSRequest,
    ResultsSMSRequest,
    SingleSMSRequest,
)
from services.results.report_builder import compose_result_message
from services.results_service import class_name, get_term, load_ranked_cohort, stream_names
from services.score_store import find_cohort_students
from services.sms_service import SMSError, sms_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sms", tags=["sms"])

NAME_PLACEHOLDER = re.compile(r"\[name\]", re.IGNORECASE)
EMERGENCY_PREVIEW_LIMIT = 10


def _unique_phones(phones):
    seen = []
    for phone in phones:
        phone = (phone or "").strip()
        if phone and phone not in seen:
            seen.append(phone)
    return seen


def _send_each(messages):
    """(학생, 번호, 본문) 목록을 한 건씩 발송. 실패는 모아서 반환"""
    sent, failed = [], []
    for student, phone, message in messages:
        try:
            result = sms_service.send(phone, message)
            sent.append({"student_id": student.id, "student": student.fullname, **result})
        except SMSError as e:
            logger.warning("SMS failed: student_id=%s phone=%s error=%s", student.id, phone, e)
            failed.append({"student_id": student.id, "student": student.fullname, "phone": phone, "error": str(e)})
    return sent, failed


# ✅ [SEND] 단건 발송
@router.post("/single", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def send_single(payload: SingleSMSRequest):
    result = sms_service.send(payload.phone, payload.message)
    return {"success": True, "data": result, "message": "SMS sent successfully"}


# ✅ [SEND] 일괄 발송 (번호 직접 지정 또는 학급/분반 보호자 전체)
@router.post("/bulk", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def send_bulk(payload: BulkSMSRequest, db: Session = Depends(get_db)):
    if payload.phones:
        phones = _unique_phones(payload.phones)
    elif payload.class_id:
        students = find_cohort_students(db, payload.class_id, payload.stream_id)
        phones = _unique_phones(s.guardian_phone for s in students)
    else:
        raise HTTPException(status_code=400, detail="Provide phones or class_id")

    if not phones:
        raise HTTPException(status_code=404, detail="No recipients found")

    results = sms_service.send_bulk(phones, payload.message)
    sent = sum(1 for r in results if r["status"] == "sent")
    return {
        "success": True,
        "data": {"total": len(phones), "sent": sent, "failed": len(phones) - sent, "results": results},
        "message": f"Bulk SMS sent to {sent} of {len(phones)} recipients"
    }


# ✅ [SEND] 학기 성적 안내 (학생별 개별 문구)
@router.post("/results", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def send_results(payload: ResultsSMSRequest, db: Session = Depends(get_db)):
    term = get_term(db, payload.term_id)
    ranked = load_ranked_cohort(db, payload.class_id, payload.term_id, term.academic_year, payload.stream_id)
    students = {s.id: s for s in find_cohort_students(db, payload.class_id, payload.stream_id)}
    streams = stream_names(db, payload.class_id)
    term_label = f"{term.term_name} {term.academic_year}"
    cls = class_name(db, payload.class_id)

    messages, skipped = [], []
    for aggregate in ranked:
        student = students.get(aggregate.student_id)
        if student is None or not student.guardian_phone or not aggregate.has_scores:
            skipped.append(aggregate.student_id)
            continue
        class_label = f"{cls} {streams.get(aggregate.stream_id, '')}".strip()
        messages.append((student, student.guardian_phone, compose_result_message(aggregate, term_label, class_label)))

    sent, failed = _send_each(messages)
    logger.info(
        "Results SMS: class_id=%s term_id=%s sent=%d failed=%d skipped=%d",
        payload.class_id, payload.term_id, len(sent), len(failed), len(skipped),
    )
    return {
        "success": True,
        "data": {"sent": sent, "failed": failed, "skipped": skipped},
        "message": f"Results SMS sent to {len(sent)} guardians"
    }


# ✅ [SEND] 출결 안내 ([name] → 학생 이름)
@router.post("/attendance", dependencies=[Depends(require_roles(*STAFF_ROLES))])
def send_attendance(payload: AttendanceSMSRequest, db: Session = Depends(get_db)):
    students = [s for s in find_cohort_students(db, payload.class_id, payload.stream_id) if s.guardian_phone]
    if not students:
        raise HTTPException(status_code=404, detail="No students with guardian phone numbers found")

    messages = [
        (s, s.guardian_phone, NAME_PLACEHOLDER.sub(lambda _: s.fullname, payload.message))
        for s in students
    ]
    sent, failed = _send_each(messages)
    return {
        "success": True,
        "data": {"sent": sent, "failed": failed},
        "message": f"Attendance SMS sent to {len(sent)} guardians"
    }


# ✅ [SEND] 긴급 공지 (전체 재학생 보호자)
@router.post("/emergency", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
def send_emergency(payload: EmergencySMSRequest, db: Session = Depends(get_db)):
    rows = (
        db.query(StudentModel.guardian_phone)
        .filter(StudentModel.is_active.is_(True), StudentModel.guardian_phone.isnot(None))
        .all()
    )
    phones = _unique_phones(phone for (phone,) in rows)
    if not phones:
        raise HTTPException(status_code=404, detail="No guardian phone numbers found")

    message = f"🚨 EMERGENCY ALERT: {payload.message} - {settings.SCHOOL_NAME}"
    results = sms_service.send_bulk(phones, message)
    sent = sum(1 for r in results if r["status"] == "sent")
    logger.warning("Emergency SMS broadcast: recipients=%d sent=%d", len(phones), sent)
    return {
        "success": True,
        "data": {"total": len(phones), "sent": sent, "results": results[:EMERGENCY_PREVIEW_LIMIT]},
        "message": f"Emergency alert sent to {sent} guardians"
    }
