"""Shared fixtures for the bill analysis tests."""

import pytest

from app.errors import GenerationError
from app.schemas.bill import BillRecord, ErrorAuditResult
from helpers import (
    CLEAN_AUDIT,
    CLEAN_BILL,
    DUPLICATE_AUDIT,
    DUPLICATE_BILL,
    DUPLICATE_LETTER,
    StubCapability,
    build_pdf,
)


@pytest.fixture
def clean_bill() -> BillRecord:
    return BillRecord.model_validate(CLEAN_BILL)


@pytest.fixture
def duplicate_bill() -> BillRecord:
    return BillRecord.model_validate(DUPLICATE_BILL)


@pytest.fixture
def clean_audit() -> ErrorAuditResult:
    return ErrorAuditResult.model_validate(CLEAN_AUDIT)


@pytest.fixture
def duplicate_audit() -> ErrorAuditResult:
    return ErrorAuditResult.model_validate(DUPLICATE_AUDIT)


@pytest.fixture
def clean_capability() -> StubCapability:
    return StubCapability({
        "extractMedicalBillData": CLEAN_BILL,
        "detectBillingErrors": CLEAN_AUDIT,
        "generateAppealLetter": GenerationError("letter must not be requested"),
    })


@pytest.fixture
def duplicate_capability() -> StubCapability:
    return StubCapability({
        "extractMedicalBillData": DUPLICATE_BILL,
        "detectBillingErrors": DUPLICATE_AUDIT,
        "generateAppealLetter": {"appealLetter": DUPLICATE_LETTER},
    })


@pytest.fixture
def clean_pdf() -> bytes:
    return build_pdf([
        "RIVERSIDE GENERAL HOSPITAL\n"
        "Patient: Jane Doe   Account: ACC-55821\n"
        "99213 Office visit            150.00\n"
        "71046 Chest X-ray              300.00\n"
        "93000 Electrocardiogram        400.00\n"
        "Total due: 850.00"
    ])
