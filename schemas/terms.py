from datetime import date
from pydantic import BaseModel, Field, model_validator
from typing import Literal

class TermCreate(BaseModel):
    term_name: Literal["Term 1", "Term 2", "Term 3"]     # 학기명
    term_number: int = Field(..., ge=1, le=3)            # 학기 번호
    academic_year: str                                   # 학년도 (예: "2024")
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Term(TermCreate):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True
