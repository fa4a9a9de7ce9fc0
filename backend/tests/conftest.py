from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from app.main import app
from app.models.employee import Employee

MANAGER_SID = "M100"


def make_employee(sid: str, manager: str | None, **fields) -> Employee:
    return Employee(sid=sid, line_manager_sid=manager, **fields)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def team_members() -> list[Employee]:
    """Two direct reports of M100; A1 leads A2 and A3, A3 leads A4."""
    return [
        make_employee(
            "A1",
            MANAGER_SID,
            first_name="Aisha",
            last_name="Rahman",
            email="aisha.rahman@example.com",
            job_code="ENG-LEAD",
            job_title="Engineering Lead",
            division="Engineering",
            location="Dubai",
        ),
        make_employee(
            "A2",
            "A1",
            first_name="Omar",
            last_name="Haddad",
            email="omar.haddad@example.com",
            job_code="ENG-2",
            job_title="Software Engineer",
            division="Engineering",
            location="Dubai",
        ),
        make_employee(
            "A3",
            "A1",
            first_name="Lina",
            last_name="Saleh",
            email="lina.saleh@example.com",
            job_code="ENG-3",
            job_title="Senior Engineer",
            division="Engineering",
            location="Abu Dhabi",
        ),
        make_employee(
            "A4",
            "A3",
            first_name="Karim",
            last_name="Nasser",
            email="karim.nasser@example.com",
            job_code="ENG-2",
            job_title="Software Engineer",
            division="Engineering",
            location="Abu Dhabi",
        ),
        make_employee(
            "B1",
            MANAGER_SID,
            first_name="Sara",
            last_name="Youssef",
            email="sara.youssef@example.com",
            job_code="FIN-1",
            job_title="Financial Analyst",
            division="Finance",
            location="Dubai",
        ),
    ]
