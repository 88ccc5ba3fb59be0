# Test type: Configuration
# Validation to be executed: Shared fixtures for all test modules
# Command: pytest test/ -v (this file is auto-loaded by pytest)

"""Shared pytest fixtures for the tax calculator test suite."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from taxcalc import database
from taxcalc.config import settings
from taxcalc.main import app
from taxcalc.models.schemas import DeductionInputs, IncomeInputs
from taxcalc.services.schedule_service import default_schedule


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    """Async HTTP client bound to the FastAPI app (no real server needed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture(autouse=True)
def passthrough_policy(monkeypatch):
    """Every test starts from the literal (passthrough) schedule policy."""
    monkeypatch.setattr(settings, "BRACKET_SCHEDULE_POLICY", "passthrough")


# ── Sample data fixtures ─────────────────────────────────────────────────

@pytest.fixture
def schedule():
    """The canonical six-band default schedule."""
    return default_schedule()


@pytest.fixture
def finite_schedule():
    """Default schedule without its unbounded top band."""
    return tuple(b for b in default_schedule() if b.upperBound is not None)


@pytest.fixture
def sample_income():
    """400,000 salary + 20,000 bonus + 10,000 other = 430,000 gross."""
    return IncomeInputs(salary=400_000, bonus=20_000, otherIncome=10_000)


@pytest.fixture
def no_deductions():
    return DeductionInputs()


@pytest.fixture
def family_deductions():
    """Spouse, two children, one qualifying parent, one disabled dependent,
    and contributions that hit several caps."""
    return DeductionInputs(
        spouseHasNoIncome=True,
        numChildren=2,
        numDisabledDependents=1,
        father={"present": True, "age": 65, "annualIncome": 0},
        mother={"present": True, "age": 58, "annualIncome": 0},
        providentFund=50_000,
        retirementFund=100_000,
        socialSecurity=12_000,
        mortgageInterest=150_000,
        lifeInsurance=80_000,
        healthInsurance=30_000,
        donations=5_000,
    )


# ── Audit persistence fixtures ───────────────────────────────────────────

class FakeAuditSession:
    """Stands in for an AsyncSession; optionally fails on commit."""

    def __init__(self, commit_error=None):
        self.commit_error = commit_error
        self.added = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def add(self, row):
        self.added.append(row)

    async def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.committed = True

    async def rollback(self):
        self.rolled_back = True

    async def close(self):
        self.closed = True


@pytest.fixture
def audit_session(monkeypatch):
    """Mark auditing available and route sessions to a FakeAuditSession."""

    def install(commit_error=None):
        session = FakeAuditSession(commit_error)
        monkeypatch.setattr(database, "_db_available", True)
        monkeypatch.setattr(database, "_async_session_factory", lambda: session)
        return session

    return install
