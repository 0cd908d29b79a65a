"""
services/export_service.py

확정된 성적 데이터 → 파일 산출물
- 학급 성적 일람표: Excel (openpyxl)
- 학생 개인 성적표: HTML 템플릿(Jinja2) → PDF (WeasyPrint)
반환값은 bytes 이며, 필요하면 save() 로 EXPORT_DIR 에 저장 후 경로를 돌려줌
"""

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from config.settings import settings
from schemas.results import IndividualReport, RankedAggregate
from services.results.report_builder import subject_teacher_lines

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (헤더, 열 너비)
RESULT_COLUMNS = [
    ("Admission No", 15),
    ("Name", 28),
    ("Class", 12),
    ("Stream", 12),
    ("Total Marks", 13),
    ("Average", 11),
    ("Grade", 9),
    ("Class Rank", 12),
    ("Stream Rank", 12),
]


class ExportError(Exception):
    """내보내기 파일 생성 실패"""
    pass


class ExportService:
    def __init__(self, template_dir: str = None, export_dir: str = None):
        # 템플릿 환경 설정
        self.env = Environment(
            loader=FileSystemLoader(Path(template_dir or settings.TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.export_dir = Path(export_dir or settings.EXPORT_DIR)

    # ===============================================================
    # Excel: 학급 성적 일람표
    # ===============================================================

    def results_workbook(self, ranked: Sequence[RankedAggregate], meta: Dict[str, Any]) -> bytes:
        """
        meta: class_name, stream_names({stream_id: 이름}), term_name, academic_year
        """
        wb = Workbook()
        ws = wb.active
        ws.title = "Results"

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        thin = Side(style="thin")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)

        for col, (header, width) in enumerate(RESULT_COLUMNS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
            cell.border = border
            ws.column_dimensions[get_column_letter(col)].width = width

        stream_names = meta.get("stream_names", {})
        for row, student in enumerate(ranked, 2):
            values = [
                student.admission_number,
                student.fullname,
                meta.get("class_name", "Unknown"),
                stream_names.get(student.stream_id, "Unknown"),
                float(student.total_score),
                float(student.average_score),
                student.overall_grade.value,
                student.class_rank,
                student.stream_rank,
            ]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border

        ws.freeze_panes = "A2"

        buffer = BytesIO()
        wb.save(buffer)
        logger.info("Results workbook generated: %d rows", len(ranked))
        return buffer.getvalue()

    # ===============================================================
    # PDF: 개인 성적표
    # ===============================================================

    def render_individual_report(self, report: IndividualReport, meta: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template("individual_report.html")
        return template.render(
            school_name=meta.get("school_name", settings.SCHOOL_NAME),
            class_name=meta.get("class_name", "Unknown"),
            stream_name=meta.get("stream_name", "Unknown"),
            term_name=meta.get("term_name", "Unknown"),
            academic_year=meta.get("academic_year", ""),
            student=report.student,
            subjects=subject_teacher_lines(report),
            comments=report.comments,
            remark=report.remark,
            strengths=report.strengths,
            areas_for_improvement=report.areas_for_improvement,
            generated_date=datetime.now().strftime("%Y-%m-%d"),
        )

    def individual_report_pdf(self, report: IndividualReport, meta: Dict[str, Any]) -> bytes:
        """HTML을 PDF로 변환"""
        # WeasyPrint 는 시스템 라이브러리(pango 등)가 필요해 실제 변환 시점에 import
        import weasyprint

        html = self.render_individual_report(report, meta)
        try:
            return weasyprint.HTML(string=html).write_pdf()
        except Exception as e:
            logger.exception("PDF generation failed: student_id=%s", report.student.student_id)
            raise ExportError(f"PDF generation failed: {e}") from e

    # ===============================================================
    # 파일 저장
    # ===============================================================

    def save(self, content: bytes, filename: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / filename
        path.write_bytes(content)
        logger.info("Export saved: %s (%d bytes)", path, len(content))
        return path


export_service = ExportService()
