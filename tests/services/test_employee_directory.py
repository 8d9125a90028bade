from datetime import date
from decimal import Decimal

import pytest

from ems.core.errors import NotFound
from ems.services import EmployeeDirectoryService


def test_list_is_region_scoped_and_ordered(lifecycle, directory, make_input, world) -> None:
    lifecycle.create(make_input(first_name="Zara", last_name="Khan"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Aarav", last_name="Mehta"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Aarav", last_name="Iyer"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Bala", location_id=world.bengaluru), region_id=world.south_region_id)

    page = directory.list_employees(world.north_region_id)

    assert page.total == 3
    assert page.page == 1
    assert page.limit == 6
    assert page.total_pages == 1
    assert [(item.first_name, item.last_name) for item in page.items] == [
        ("Aarav", "Iyer"),
        ("Aarav", "Mehta"),
        ("Zara", "Khan"),
    ]
    assert page.items[0].location == "Delhi"
    assert page.items[0].company_name == "Acme Technologies"


def test_list_paginates(lifecycle, directory, make_input, world) -> None:
    for index in range(5):
        lifecycle.create(make_input(first_name=f"Emp{index}"), region_id=world.north_region_id)

    page = directory.list_employees(world.north_region_id, page=2, limit=2)

    assert page.total == 5
    assert page.total_pages == 3
    assert [item.first_name for item in page.items] == ["Emp2", "Emp3"]


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 6)),
        (0, -3, (1, 6)),
        (3, 500, (3, 100)),
        (2, 10, (2, 10)),
    ],
)
def test_normalize_paging(page, limit, expected) -> None:
    assert EmployeeDirectoryService.normalize_paging(page, limit) == expected


def test_get_employee_includes_salary_snapshot(lifecycle, directory, make_input, world) -> None:
    employee_id = lifecycle.create(
        make_input(ctc_lpa=Decimal("18.75"), effective_from=date(2024, 4, 1), remarks="Offer letter"),
        region_id=world.north_region_id,
    )

    detail = directory.get_employee(employee_id, world.north_region_id)

    assert detail.employee_id == employee_id
    assert detail.region_name == "North"
    assert detail.department_name == "Engineering"
    assert detail.designation_name == "Engineer"
    assert detail.salary is not None
    assert detail.salary.ctc_lpa == Decimal("18.75")
    assert detail.salary.remarks == "Offer letter"
    assert detail.model_dump(mode="json")["salary"]["ctc_lpa"] == "18.75"


def test_get_employee_without_salary(lifecycle, directory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)

    assert directory.get_employee(employee_id, world.north_region_id).salary is None


def test_get_employee_in_other_region_is_not_found(lifecycle, directory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)

    with pytest.raises(NotFound):
        directory.get_employee(employee_id, world.south_region_id)


def test_search_matches_names_and_email_case_insensitively(lifecycle, directory, make_input, world) -> None:
    lifecycle.create(make_input(first_name="Priya", last_name="Sharma", email="priya.s@example.com"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Rahul", last_name="Verma", email="rv@corp.example"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Priyanka", location_id=world.bengaluru), region_id=world.south_region_id)

    assert [row.first_name for row in directory.search(world.north_region_id, "PRIYA")] == ["Priya"]
    assert [row.first_name for row in directory.search(world.north_region_id, "verm")] == ["Rahul"]
    assert [row.first_name for row in directory.search(world.north_region_id, "corp.example")] == ["Rahul"]


def test_search_treats_wildcards_literally(lifecycle, directory, make_input, world) -> None:
    lifecycle.create(make_input(first_name="Plain", email="plain@example.com"), region_id=world.north_region_id)
    lifecycle.create(make_input(first_name="Under", email="under_score@example.com"), region_id=world.north_region_id)

    assert [row.first_name for row in directory.search(world.north_region_id, "_")] == ["Under"]
    assert directory.search(world.north_region_id, "%") == []


def test_blank_search_returns_nothing(lifecycle, directory, make_input, world) -> None:
    lifecycle.create(make_input(), region_id=world.north_region_id)

    assert directory.search(world.north_region_id, "") == []
    assert directory.search(world.north_region_id, "   ") == []
    assert directory.search(world.north_region_id, None) == []


def test_salary_history_is_newest_first(lifecycle, directory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("10"), effective_from=date(2023, 1, 1)), region_id=world.north_region_id)
    lifecycle.update(
        employee_id,
        make_input(ctc_lpa=Decimal("11"), effective_from=date(2024, 1, 1)),
        region_id=world.north_region_id,
    )

    history = directory.salary_history(employee_id, world.north_region_id)

    assert [entry.ctc_lpa for entry in history] == [Decimal("10.00"), Decimal("10.00")]
    assert history[0].effective_to == date.today()
    assert history[1].effective_to is None

    with pytest.raises(NotFound):
        directory.salary_history(employee_id, world.south_region_id)


def test_lookups_limit_locations_to_region(directory, world) -> None:
    lookups = directory.lookups(world.north_region_id)

    assert [option.name for option in lookups.locations] == ["Chandigarh", "Delhi"]
    assert {option.name for option in lookups.companies} == {"Acme Technologies", "Globex Services"}
    assert "FULL_TIME" in lookups.employment_types
    assert lookups.salary_types == ["CTC", "FIXED", "VARIABLE"]
    assert "ACTIVE" in lookups.statuses
