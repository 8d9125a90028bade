"""Database models for the employee records domain."""
from __future__ import annotations

from .activity import Attendance, LeaveRequest, PerformanceReview, ProjectAssignment
from .base import Base
from .document import PROFILE_PHOTO, EmployeeDocument, EmployeeImage
from .employee import EMAIL_CONSTRAINT, Employee, EmployeeStatus, EmploymentType, Gender
from .operator import HrLogin
from .reference import Company, Country, Department, Designation, Location, Region
from .salary import EmployeeSalaryCurrent, EmployeeSalaryHistory, SalaryType

__all__ = [
    "Base",
    "Attendance",
    "LeaveRequest",
    "PerformanceReview",
    "ProjectAssignment",
    "EMAIL_CONSTRAINT",
    "PROFILE_PHOTO",
    "EmployeeDocument",
    "EmployeeImage",
    "Employee",
    "EmployeeStatus",
    "EmploymentType",
    "Gender",
    "HrLogin",
    "Company",
    "Country",
    "Department",
    "Designation",
    "Location",
    "Region",
    "EmployeeSalaryCurrent",
    "EmployeeSalaryHistory",
    "SalaryType",
]
