"""Routes for employee records scoped to the operator's region."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ems.core.log import get_logger
from ems.core.security import AuthenticatedOperator, get_current_operator
from ems.schemas.employees import (
    EmployeeDetail,
    EmployeeLookups,
    EmployeeMutation,
    EmployeePage,
    EmployeePayload,
    EmployeeSearchResult,
    SalaryHistoryEntry,
)
from ems.services import EmployeeDirectoryService, EmployeeInput, EmployeeLifecycleService
from ems.web.dependencies import get_directory_service, get_lifecycle_service
from ems.web.utils.query_params import extract_pagination, extract_search_term

router = APIRouter(prefix="/employees", tags=["employees"])
LOGGER = get_logger(__name__)


def _to_input(payload: EmployeePayload) -> EmployeeInput:
    return EmployeeInput(**payload.model_dump())


@router.get("", response_model=EmployeePage)
def list_employees(
    request: Request,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeDirectoryService = Depends(get_directory_service),
) -> EmployeePage:
    pagination = extract_pagination(request.query_params)
    return service.list_employees(operator.region_id, pagination.page, pagination.limit)


@router.post("", response_model=EmployeeMutation, status_code=201)
def create_employee(
    payload: EmployeePayload,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeLifecycleService = Depends(get_lifecycle_service),
) -> EmployeeMutation:
    employee_id = service.create(_to_input(payload), region_id=operator.region_id)
    LOGGER.debug("Employee %s created by hr_id=%s", employee_id, operator.hr_id)
    return EmployeeMutation(message="Employee created successfully", employee_id=employee_id)


# Static segments are declared before ``/{employee_id}``.
@router.get("/lookups", response_model=EmployeeLookups)
def employee_lookups(
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeDirectoryService = Depends(get_directory_service),
) -> EmployeeLookups:
    return service.lookups(operator.region_id)


@router.get("/search", response_model=list[EmployeeSearchResult])
def search_employees(
    request: Request,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeDirectoryService = Depends(get_directory_service),
) -> list[EmployeeSearchResult]:
    return service.search(operator.region_id, extract_search_term(request.query_params))


@router.get("/{employee_id}", response_model=EmployeeDetail)
def get_employee(
    employee_id: int,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeDirectoryService = Depends(get_directory_service),
) -> EmployeeDetail:
    return service.get_employee(employee_id, operator.region_id)


@router.get("/{employee_id}/salary-history", response_model=list[SalaryHistoryEntry])
def salary_history(
    employee_id: int,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeDirectoryService = Depends(get_directory_service),
) -> list[SalaryHistoryEntry]:
    return service.salary_history(employee_id, operator.region_id)


@router.put("/{employee_id}", response_model=EmployeeMutation)
def update_employee(
    employee_id: int,
    payload: EmployeePayload,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeLifecycleService = Depends(get_lifecycle_service),
) -> EmployeeMutation:
    service.update(employee_id, _to_input(payload), region_id=operator.region_id)
    return EmployeeMutation(message="Employee updated successfully", employee_id=employee_id)


@router.delete("/{employee_id}", response_model=EmployeeMutation)
def delete_employee(
    employee_id: int,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: EmployeeLifecycleService = Depends(get_lifecycle_service),
) -> EmployeeMutation:
    service.delete(employee_id, region_id=operator.region_id)
    return EmployeeMutation(message="Employee deleted successfully", employee_id=employee_id)
