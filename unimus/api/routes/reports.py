from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.report import DatasetReport, ReportExportRequest, ReportFilter
from unimus.services.export import FILE_EXTENSIONS, MEDIA_TYPES, export_report
from unimus.services.reports import generate_report

router = APIRouter(prefix="/reports")


@router.get("", response_model=DatasetReport)
async def get_report(
    filters: Annotated[ReportFilter, Query()],
    db: AsyncSession = Depends(get_db_session),
) -> DatasetReport:
    return await generate_report(db, filters)


@router.post("/export")
async def export(
    export_request: ReportExportRequest,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """Generate a report and return it as a downloadable csv or tsv file."""
    report = await generate_report(db, export_request.filters)
    content = export_report(
        report,
        export_request.format.value,
        include_charts=export_request.include_charts,
    )
    extension = FILE_EXTENSIONS[export_request.format]
    return Response(
        content=content,
        media_type=MEDIA_TYPES[export_request.format],
        headers={
            "Content-Disposition": f'attachment; filename="dataset-report.{extension}"'
        },
    )
