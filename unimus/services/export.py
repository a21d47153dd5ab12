"""Render a `DatasetReport` as a downloadable document.

`csv` is plain comma-separated sections. `excel` is a tab-separated text
document that spreadsheet applications open directly; it carries a title
block and, optionally, notes on which charts suit each section.
"""

import csv
import io
from datetime import datetime

from structlog import get_logger

from unimus.api.schemas.report import (
    ContributorCount,
    DatasetReport,
    DepartmentCount,
    ExportFormat,
    YearCount,
)
from unimus.errors import ValidationError
from unimus.models.base import utcnow

logger = get_logger(__name__)

CHART_NOTES = [
    "Chart 1: Datasets by Year - Line chart recommended",
    "Chart 2: Top Contributors - Bar chart recommended",
    "Chart 3: Department Distribution - Pie chart recommended",
]

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.EXCEL: "text/tab-separated-values",
}

FILE_EXTENSIONS = {
    ExportFormat.CSV: "csv",
    ExportFormat.EXCEL: "tsv",
}


def _years(report: DatasetReport) -> list[YearCount]:
    return sorted(report.datasets_by_year, key=lambda item: item.year)


def _contributors(report: DatasetReport) -> list[ContributorCount]:
    return sorted(report.datasets_by_contributor, key=lambda item: -item.count)


def _departments(report: DatasetReport) -> list[DepartmentCount]:
    return sorted(report.department_breakdown, key=lambda item: -item.count)


def _summary(report: DatasetReport) -> list[list]:
    return [
        ["Total Datasets", report.total_datasets],
        ["Student Contributors", report.student_involvement.student_contributors],
        ["Total Student Datasets", report.student_involvement.total_student_datasets],
    ]


def export_csv(report: DatasetReport) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Dataset Summary"])
    writer.writerow(["Metric", "Value"])
    writer.writerows(_summary(report))
    writer.writerow([])

    writer.writerow(["Datasets by Year"])
    writer.writerow(["Year", "Count"])
    writer.writerows([item.year, item.count] for item in _years(report))
    writer.writerow([])

    writer.writerow(["Datasets by Contributor"])
    writer.writerow(["Contributor ID", "Contributor Name", "Count"])
    writer.writerows(
        [item.contributor_id, item.contributor_name, item.count]
        for item in _contributors(report)
    )
    writer.writerow([])

    writer.writerow(["Department Breakdown"])
    writer.writerow(["Department", "Count"])
    writer.writerows([item.department, item.count] for item in _departments(report))

    return buffer.getvalue().encode("utf-8")


def _tsv_field(value) -> str:
    # a tab or newline inside a value would shift the columns
    return str(value).replace("\t", " ").replace("\r", " ").replace("\n", " ")


def _tsv_row(*values) -> str:
    return "\t".join(_tsv_field(value) for value in values)


def export_excel(
    report: DatasetReport, include_charts: bool = False, now: datetime | None = None
) -> bytes:
    generated = (now or utcnow()).isoformat()
    lines = [
        "Dataset Report Export",
        f"Generated: {generated}",
        f"Charts Included: {'Yes' if include_charts else 'No'}",
        "",
        "=== SUMMARY ===",
        _tsv_row("Metric", "Value"),
        *(_tsv_row(*row) for row in _summary(report)),
        "",
        "=== DATASETS BY YEAR ===",
        _tsv_row("Year", "Count"),
        *(_tsv_row(item.year, item.count) for item in _years(report)),
        "",
        "=== TOP CONTRIBUTORS ===",
        _tsv_row("Contributor ID", "Contributor Name", "Dataset Count"),
        *(
            _tsv_row(item.contributor_id, item.contributor_name, item.count)
            for item in _contributors(report)
        ),
        "",
        "=== DEPARTMENT BREAKDOWN ===",
        _tsv_row("Department", "Count"),
        *(_tsv_row(item.department, item.count) for item in _departments(report)),
    ]
    if include_charts:
        lines += ["", "=== CHART DATA NOTES ===", *CHART_NOTES]

    return ("\n".join(lines) + "\n").encode("utf-8")


def export_report(
    report: DatasetReport, file_format: str, include_charts: bool = False
) -> bytes:
    """Serialize `report` as `csv` or `excel`.

    Raises:
        ValidationError: for any other format
    """
    try:
        export_format = ExportFormat(file_format)
    except ValueError as e:
        raise ValidationError(f"Unsupported export format: {file_format}") from e

    if export_format == ExportFormat.CSV:
        content = export_csv(report)
    else:
        content = export_excel(report, include_charts=include_charts)

    logger.info(
        "Exported report",
        format=export_format.value,
        include_charts=include_charts,
        size=len(content),
    )
    return content
