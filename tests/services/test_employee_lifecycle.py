from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ems.core.errors import AccessDenied, ConstraintViolation, DuplicateEmail, MissingRequiredField, NotFound
from ems.models import (
    Attendance,
    Employee,
    EmployeeDocument,
    EmployeeImage,
    EmployeeSalaryCurrent,
    EmployeeSalaryHistory,
    LeaveRequest,
    PerformanceReview,
    ProjectAssignment,
)
from ems.repositories import EmployeeRepository, SalaryRepository
from ems.services.employee_lifecycle import ARCHIVE_REMARK, _translate_integrity_error


def _count(session_factory, model, employee_id: int) -> int:
    with session_factory() as session:
        return session.execute(
            select(func.count()).select_from(model).where(model.employee_id == employee_id)
        ).scalar_one()


def _snapshot(session_factory, employee_id: int):
    with session_factory() as session:
        return SalaryRepository(session).get_current(employee_id)


def _history(session_factory, employee_id: int):
    with session_factory() as session:
        return SalaryRepository(session).list_history(employee_id)


def test_create_without_salary_writes_only_employee(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)

    assert _count(session_factory, Employee, employee_id) == 1
    assert _snapshot(session_factory, employee_id) is None
    assert _history(session_factory, employee_id) == []


def test_create_with_salary_opens_ledger(lifecycle, session_factory, make_input, world) -> None:
    """A positive salary yields one snapshot and one open-ended history row."""

    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)

    snapshot = _snapshot(session_factory, employee_id)
    assert snapshot is not None
    assert snapshot.ctc_lpa == Decimal("12.00")
    assert snapshot.effective_from == date(2024, 1, 1)
    assert snapshot.salary_type == "CTC"
    assert snapshot.currency == "INR"

    history = _history(session_factory, employee_id)
    assert len(history) == 1
    assert history[0].ctc_lpa == Decimal("12.00")
    assert history[0].effective_from == date(2024, 1, 1)
    assert history[0].effective_to is None


def test_create_salary_falls_back_to_joining_date(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("8.5"), joining_date=date(2022, 7, 11)), region_id=world.north_region_id)

    assert _snapshot(session_factory, employee_id).effective_from == date(2022, 7, 11)


def test_create_salary_falls_back_to_today(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("8.5"), joining_date=None), region_id=world.north_region_id)

    assert _snapshot(session_factory, employee_id).effective_from == date.today()


def test_create_with_zero_salary_skips_ledger(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("0"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)

    assert _snapshot(session_factory, employee_id) is None
    assert _history(session_factory, employee_id) == []


def test_create_reports_every_missing_field(lifecycle, session_factory, make_input, world) -> None:
    with pytest.raises(MissingRequiredField) as excinfo:
        lifecycle.create(make_input(first_name="   ", email=None, designation_id=None), region_id=world.north_region_id)

    assert excinfo.value.fields == ("first_name", "email", "designation_id")
    assert excinfo.value.status_code == 400
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Employee)).scalar_one() == 0


def test_create_duplicate_email_is_rejected(lifecycle, session_factory, make_input, world) -> None:
    lifecycle.create(make_input(email="dup@example.com"), region_id=world.north_region_id)

    with pytest.raises(DuplicateEmail):
        lifecycle.create(make_input(email="DUP@example.com", ctc_lpa=Decimal("5")), region_id=world.north_region_id)

    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Employee)).scalar_one() == 1
        assert session.execute(select(func.count()).select_from(EmployeeSalaryCurrent)).scalar_one() == 0


@pytest.mark.parametrize(
    "driver_message",
    [
        "UNIQUE constraint failed: employee.email",
        "(1062, \"Duplicate entry 'a@example.com' for key 'employee.uq_employee_email'\")",
        "constraint uq_employee_email violated",
    ],
)
def test_email_integrity_errors_become_duplicate_email(driver_message) -> None:
    error = IntegrityError("INSERT INTO employee ...", {}, Exception(driver_message))

    assert isinstance(_translate_integrity_error(error, "a@example.com"), DuplicateEmail)


def test_other_integrity_errors_keep_driver_detail() -> None:
    error = IntegrityError("INSERT INTO employee ...", {}, Exception("CHECK constraint failed: ck_employee_gender"))

    translated = _translate_integrity_error(error, None)

    assert isinstance(translated, ConstraintViolation)
    assert translated.detail == "CHECK constraint failed: ck_employee_gender"


def test_create_with_unknown_employment_type_is_a_constraint_violation(lifecycle, make_input, world) -> None:
    with pytest.raises(ConstraintViolation) as excinfo:
        lifecycle.create(make_input(employment_type="FREELANCE"), region_id=world.north_region_id)

    assert excinfo.value.detail


def test_create_with_unknown_location_is_a_constraint_violation(lifecycle, make_input, world) -> None:
    with pytest.raises(ConstraintViolation):
        lifecycle.create(make_input(location_id=999_999), region_id=world.north_region_id)


def test_create_at_location_outside_region_is_rejected(lifecycle, session_factory, make_input, world) -> None:
    with pytest.raises(ConstraintViolation) as excinfo:
        lifecycle.create(make_input(location_id=world.bengaluru), region_id=world.north_region_id)

    assert "outside the operator's region" in excinfo.value.detail
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Employee)).scalar_one() == 0


def test_update_cannot_move_employee_to_another_region(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(first_name="Stays"), region_id=world.north_region_id)

    with pytest.raises(ConstraintViolation):
        lifecycle.update(
            employee_id,
            make_input(first_name="Moved", location_id=world.bengaluru),
            region_id=world.north_region_id,
        )

    with session_factory() as session:
        employee = session.get(Employee, employee_id)
        assert employee.first_name == "Stays"
        assert employee.location_id == world.delhi


def test_update_can_move_employee_within_region(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)
    chandigarh = world.reference.location_ids["Chandigarh"]

    lifecycle.update(employee_id, make_input(location_id=chandigarh), region_id=world.north_region_id)

    with session_factory() as session:
        assert session.get(Employee, employee_id).location_id == chandigarh


def test_update_with_unchanged_salary_keeps_history(lifecycle, session_factory, make_input, world) -> None:
    payload = make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1))
    employee_id = lifecycle.create(payload, region_id=world.north_region_id)

    payload.remarks = "Annual check"
    lifecycle.update(employee_id, payload, region_id=world.north_region_id)

    assert len(_history(session_factory, employee_id)) == 1
    snapshot = _snapshot(session_factory, employee_id)
    assert snapshot.remarks == "Annual check"
    assert snapshot.ctc_lpa == Decimal("12.00")


def test_update_with_new_amount_archives_previous_snapshot(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)

    lifecycle.update(
        employee_id,
        make_input(ctc_lpa=Decimal("15"), effective_from=date(2024, 6, 1)),
        region_id=world.north_region_id,
    )

    snapshot = _snapshot(session_factory, employee_id)
    assert snapshot.ctc_lpa == Decimal("15.00")
    assert snapshot.effective_from == date(2024, 6, 1)

    history = _history(session_factory, employee_id)
    assert len(history) == 2
    archived, original = history
    assert archived.ctc_lpa == Decimal("12.00")
    assert archived.effective_from == date(2024, 1, 1)
    assert archived.effective_to == date.today()
    assert archived.remarks == ARCHIVE_REMARK
    assert original.effective_to is None


def test_repeated_identical_update_adds_no_history(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)
    revision = make_input(ctc_lpa=Decimal("15"), effective_from=date(2024, 6, 1))

    lifecycle.update(employee_id, revision, region_id=world.north_region_id)
    lifecycle.update(employee_id, revision, region_id=world.north_region_id)

    assert len(_history(session_factory, employee_id)) == 2


def test_update_salary_type_change_counts_as_revision(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)

    lifecycle.update(
        employee_id,
        make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1), salary_type="fixed"),
        region_id=world.north_region_id,
    )

    assert _snapshot(session_factory, employee_id).salary_type == "FIXED"
    assert len(_history(session_factory, employee_id)) == 2


def test_update_without_effective_date_leaves_salary_alone(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)

    lifecycle.update(
        employee_id,
        make_input(first_name="Renamed", ctc_lpa=Decimal("20")),
        region_id=world.north_region_id,
    )

    assert _snapshot(session_factory, employee_id).ctc_lpa == Decimal("12.00")
    assert len(_history(session_factory, employee_id)) == 1
    with session_factory() as session:
        assert session.get(Employee, employee_id).first_name == "Renamed"


def test_update_opens_ledger_when_no_snapshot(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)

    lifecycle.update(
        employee_id,
        make_input(ctc_lpa=Decimal("9"), effective_from=date(2024, 3, 1)),
        region_id=world.north_region_id,
    )

    assert _snapshot(session_factory, employee_id).ctc_lpa == Decimal("9.00")
    history = _history(session_factory, employee_id)
    assert len(history) == 1
    assert history[0].effective_to is None


def test_update_outside_region_is_not_found(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(first_name="Original"), region_id=world.north_region_id)

    with pytest.raises(NotFound):
        lifecycle.update(employee_id, make_input(first_name="Hijacked"), region_id=world.south_region_id)

    with session_factory() as session:
        assert session.get(Employee, employee_id).first_name == "Original"


def test_update_validates_before_touching_rows(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(first_name="Original"), region_id=world.north_region_id)

    with pytest.raises(MissingRequiredField):
        lifecycle.update(employee_id, make_input(first_name="Changed", last_name=None), region_id=world.north_region_id)

    with session_factory() as session:
        assert session.get(Employee, employee_id).first_name == "Original"


def test_update_defaults_missing_status_to_active(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(status="ON_LEAVE"), region_id=world.north_region_id)

    lifecycle.update(employee_id, make_input(), region_id=world.north_region_id)

    with session_factory() as session:
        assert session.get(Employee, employee_id).status == "ACTIVE"


def _populate_dependents(session_factory, employee_id: int) -> None:
    with session_factory.begin() as session:
        session.add_all(
            [
                Attendance(employee_id=employee_id, attendance_date=date(2024, 2, 1), status="PRESENT"),
                LeaveRequest(employee_id=employee_id, start_date=date(2024, 3, 1), end_date=date(2024, 3, 2)),
                ProjectAssignment(employee_id=employee_id, project_name="Payroll revamp", allocation_pct=50),
                PerformanceReview(employee_id=employee_id, review_period="2023-H2", rating=4),
            ]
        )


def test_delete_removes_employee_and_every_dependent(
    lifecycle, documents, session_factory, make_input, world, blob_store
) -> None:
    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)
    lifecycle.update(
        employee_id,
        make_input(ctc_lpa=Decimal("14"), effective_from=date(2024, 6, 1)),
        region_id=world.north_region_id,
    )
    _populate_dependents(session_factory, employee_id)
    uploaded = documents.upload(
        employee_id,
        world.north_region_id,
        document_type="AADHAAR",
        filename="aadhaar.pdf",
        content=b"%PDF-1.4",
    )
    image = documents.upload_image(employee_id, world.north_region_id, filename="me.png", content=b"png")

    assert lifecycle.delete(employee_id, region_id=world.north_region_id) == employee_id

    for model in (
        Employee,
        Attendance,
        LeaveRequest,
        ProjectAssignment,
        PerformanceReview,
        EmployeeDocument,
        EmployeeImage,
        EmployeeSalaryHistory,
        EmployeeSalaryCurrent,
    ):
        assert _count(session_factory, model, employee_id) == 0, model.__tablename__
    assert not blob_store.path_for(uploaded.file_url).exists()
    assert not blob_store.path_for(image.image_url).exists()


def test_delete_outside_region_is_not_found(lifecycle, session_factory, make_input, world) -> None:
    employee_id = lifecycle.create(make_input(), region_id=world.north_region_id)

    with pytest.raises(AccessDenied) as excinfo:
        lifecycle.delete(employee_id, region_id=world.south_region_id)

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Employee not found"
    assert _count(session_factory, Employee, employee_id) == 1


def test_delete_unknown_employee_is_not_found(lifecycle, world) -> None:
    with pytest.raises(NotFound):
        lifecycle.delete(424242, region_id=world.north_region_id)


def test_failed_delete_rolls_back_every_step(lifecycle, session_factory, make_input, world, monkeypatch) -> None:
    """A failure midway through the cascade leaves every row in place."""

    employee_id = lifecycle.create(make_input(ctc_lpa=Decimal("12"), effective_from=date(2024, 1, 1)), region_id=world.north_region_id)
    _populate_dependents(session_factory, employee_id)

    original_delete_rows = EmployeeRepository.delete_rows

    def failing_delete_rows(self, model, target_id):
        if model is EmployeeSalaryHistory:
            raise RuntimeError("simulated failure")
        return original_delete_rows(self, model, target_id)

    monkeypatch.setattr(EmployeeRepository, "delete_rows", failing_delete_rows)

    with pytest.raises(RuntimeError, match="simulated failure"):
        lifecycle.delete(employee_id, region_id=world.north_region_id)

    for model in (
        Employee,
        Attendance,
        LeaveRequest,
        ProjectAssignment,
        PerformanceReview,
        EmployeeSalaryHistory,
        EmployeeSalaryCurrent,
    ):
        assert _count(session_factory, model, employee_id) == 1, model.__tablename__
