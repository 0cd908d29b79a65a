from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import STAFF_ROLES, require_roles
from services.export_service import XLSX_MEDIA_TYPE, export_service
from services.results.grading import ScaleBasis
from services.results.report_builder import build_cohort_summary
from services.results_service import export_meta, get_term, load_individual_report, load_ranked_cohort, scale_for

router = APIRouter(
    prefix="/results",
    tags=["results"],
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)


def _ranked_or_404(db: Session, class_id: int, term_id: int, academic_year: str, stream_id: int = None, basis: ScaleBasis = ScaleBasis.AVERAGE):
    ranked = load_ranked_cohort(db, class_id, term_id, academic_year, stream_id, scale_for(basis))
    if not ranked:
        raise HTTPException(status_code=404, detail="No students found for the specified criteria")
    return ranked


# ✅ [READ] 학급(분반) 성적 일람 (석차 포함)
@router.get("/submitted")
def read_submitted_results(
    class_id: int,
    term_id: int,
    academic_year: str,
    stream_id: int = None,
    basis: ScaleBasis = ScaleBasis.AVERAGE,
    db: Session = Depends(get_db),
):
    get_term(db, term_id)
    ranked = _ranked_or_404(db, class_id, term_id, academic_year, stream_id, basis)
    return {
        "success": True,
        "data": [r.model_dump(mode="json") for r in ranked],
        "count": len(ranked),
    }


# ✅ [ANALYTICS] 코호트 요약 통계
@router.get("/summary")
def read_results_summary(
    class_id: int,
    term_id: int,
    academic_year: str,
    stream_id: int = None,
    db: Session = Depends(get_db),
):
    get_term(db, term_id)
    ranked = load_ranked_cohort(db, class_id, term_id, academic_year, stream_id)
    return {"success": True, "data": build_cohort_summary(ranked).model_dump(mode="json")}


# ✅ [EXPORT] 학급 성적 일람표 Excel 다운로드
@router.get("/export")
def export_results(
    class_id: int,
    term_id: int,
    academic_year: str,
    stream_id: int = None,
    basis: ScaleBasis = ScaleBasis.AVERAGE,
    save: bool = False,
    db: Session = Depends(get_db),
):
    term = get_term(db, term_id)
    ranked = _ranked_or_404(db, class_id, term_id, academic_year, stream_id, basis)
    meta = export_meta(db, class_id, term, academic_year)

    content = export_service.results_workbook(ranked, meta)
    stream_label = meta["stream_names"].get(stream_id, "all") if stream_id else "all"
    filename = f"results_{meta['class_name']}_{stream_label}_{academic_year}.xlsx".replace(" ", "_")
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    # save=true 면 EXPORT_DIR 에 사본 보관 후 파일명을 헤더로 알려줌
    if save:
        headers["X-Export-File"] = export_service.save(content, filename).name

    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=headers)


# ✅ [EXPORT] 학생 개인 성적표 PDF 다운로드
@router.get("/export/student/{student_id}")
def export_student_report(student_id: int, term_id: int, academic_year: str = None, db: Session = Depends(get_db)):
    report, meta = load_individual_report(db, student_id, term_id, academic_year)
    content = export_service.individual_report_pdf(report, meta)
    filename = f"report_{report.student.admission_number}_{meta['term_name']}_{meta['academic_year']}.pdf".replace(" ", "_")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ✅ [READ] 학생 개인 성적표 (JSON)
@router.get("/student/{student_id}")
def read_student_report(student_id: int, term_id: int, academic_year: str = None, db: Session = Depends(get_db)):
    report, meta = load_individual_report(db, student_id, term_id, academic_year)
    data = report.model_dump(mode="json")
    data["school"] = {
        "name": meta["school_name"],
        "class_name": meta["class_name"],
        "stream_name": meta["stream_name"],
        "term_name": meta["term_name"],
        "academic_year": meta["academic_year"],
    }
    return {"success": True, "data": data}
