import pytest
import pytest_asyncio

from tests.utils import make_dataset, make_profile, make_user
from unimus.api.schemas.report import ReportFilter
from unimus.models import ProfileType
from unimus.services.reports import (
    base_filters,
    contributor_join_filters,
    generate_report,
)


@pytest_asyncio.fixture
async def department(db):
    """Two lecturers and two students across two departments.

    alice (lecturer, CS):     2022, 2023
    bob (student, CS):        2023, 2023, 2024
    carol (student, Physics): 2023
    dan (no profile, email):  2022
    """
    alice = await make_user(db, name="Alice")
    bob = await make_user(db, name="Bob")
    carol = await make_user(db, name="Carol")
    dan = await make_user(db, name=None, email="dan@example.com")
    await make_profile(db, alice, ProfileType.LECTURER, department="Computer Science")
    await make_profile(db, bob, ProfileType.STUDENT, department="Computer Science")
    await make_profile(db, carol, ProfileType.STUDENT, department="Physics")

    for user, years in [
        (alice, [2022, 2023]),
        (bob, [2023, 2023, 2024]),
        (carol, [2023]),
        (dan, [2022]),
    ]:
        for year in years:
            await make_dataset(db, user, publication_year=year)

    return {"alice": alice, "bob": bob, "carol": carol, "dan": dan}


def test_filter_sets():
    filters = ReportFilter(
        start_year=2020,
        end_year=2024,
        contributor_id=3,
        profile_type="student",
        department="Physics",
    )

    assert len(base_filters(None)) == 0
    assert len(base_filters(filters)) == 3
    assert len(contributor_join_filters(filters)) == 5
    assert len(contributor_join_filters(ReportFilter(department="Physics"))) == 1


@pytest.mark.asyncio
async def test_report_without_filters(db, department):
    report = await generate_report(db)

    assert report.total_datasets == 7
    assert [(y.year, y.count) for y in report.datasets_by_year] == [
        (2022, 2),
        (2023, 4),
        (2024, 1),
    ]
    assert [
        (c.contributor_id, c.contributor_name, c.count)
        for c in report.datasets_by_contributor
    ] == [
        (department["bob"].id, "Bob", 3),
        (department["alice"].id, "Alice", 2),
        (department["carol"].id, "Carol", 1),
        (department["dan"].id, "dan@example.com", 1),
    ]
    assert report.student_involvement.student_contributors == 2
    assert report.student_involvement.total_student_datasets == 4
    assert [(d.department, d.count) for d in report.department_breakdown] == [
        ("Computer Science", 5),
        ("Physics", 1),
    ]


@pytest.mark.asyncio
async def test_report_year_range(db, department):
    report = await generate_report(db, ReportFilter(start_year=2023, end_year=2023))

    assert report.total_datasets == 4
    assert [(y.year, y.count) for y in report.datasets_by_year] == [(2023, 4)]
    assert report.student_involvement.student_contributors == 2
    assert report.student_involvement.total_student_datasets == 3


@pytest.mark.asyncio
async def test_report_year_range_single_year_subset(db):
    contributor = await make_user(db)
    for year in [2022, 2023, 2023, 2024]:
        await make_dataset(db, contributor, publication_year=year)

    report = await generate_report(db, ReportFilter(start_year=2023, end_year=2023))

    assert report.total_datasets == 2
    assert report.model_dump(by_alias=True)["datasetsByYear"] == [
        {"year": 2023, "count": 2}
    ]


@pytest.mark.asyncio
async def test_report_profile_filters_only_apply_to_joined_statistics(db, department):
    report = await generate_report(db, ReportFilter(department="Physics"))

    # dataset-only statistics ignore profile filters
    assert report.total_datasets == 7
    assert sum(y.count for y in report.datasets_by_year) == 7

    assert [c.contributor_name for c in report.datasets_by_contributor] == ["Carol"]
    assert [(d.department, d.count) for d in report.department_breakdown] == [
        ("Physics", 1)
    ]


@pytest.mark.asyncio
async def test_report_profile_type_filter(db, department):
    report = await generate_report(db, ReportFilter(profile_type="lecturer"))

    assert [c.contributor_name for c in report.datasets_by_contributor] == ["Alice"]
    assert [(d.department, d.count) for d in report.department_breakdown] == [
        ("Computer Science", 2)
    ]
    # student involvement always counts students
    assert report.student_involvement.total_student_datasets == 4


@pytest.mark.asyncio
async def test_report_contributor_filter(db, department):
    report = await generate_report(
        db, ReportFilter(contributor_id=department["alice"].id)
    )

    assert report.total_datasets == 2
    assert report.student_involvement.student_contributors == 0
    assert report.student_involvement.total_student_datasets == 0


@pytest.mark.asyncio
async def test_empty_report(db):
    report = await generate_report(db)

    assert report.total_datasets == 0
    assert report.datasets_by_year == []
    assert report.datasets_by_contributor == []
    assert report.student_involvement.student_contributors == 0
    assert report.department_breakdown == []
