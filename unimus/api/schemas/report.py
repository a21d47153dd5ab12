from enum import Enum

from pydantic import Field

from unimus.models.enums import ProfileType

from .base import BaseSchema, CamelSchema


class ReportFilter(BaseSchema):
    start_year: int | None = None
    end_year: int | None = None
    contributor_id: int | None = None
    profile_type: ProfileType | None = None
    department: str | None = None


class YearCount(CamelSchema):
    year: int
    count: int


class ContributorCount(CamelSchema):
    contributor_id: int
    contributor_name: str
    count: int


class StudentInvolvement(CamelSchema):
    student_contributors: int = 0
    total_student_datasets: int = 0


class DepartmentCount(CamelSchema):
    department: str
    count: int


class DatasetReport(CamelSchema):
    total_datasets: int = 0
    datasets_by_year: list[YearCount] = Field(default_factory=list)
    datasets_by_contributor: list[ContributorCount] = Field(default_factory=list)
    student_involvement: StudentInvolvement = Field(default_factory=StudentInvolvement)
    department_breakdown: list[DepartmentCount] = Field(default_factory=list)


class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"


class ReportExportRequest(CamelSchema):
    format: ExportFormat
    include_charts: bool = False
    filters: ReportFilter | None = None
