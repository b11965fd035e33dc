import pytest

from secondbrain.core.types import SearchRecord


@pytest.fixture
def handbook_records():
    return [
        SearchRecord(
            record_id="r1",
            fields={
                "chunk_id": "hb-001",
                "heading": "Onboarding",
                "content": "New employees receive a laptop and a security badge.",
                "document_name": "Employee Handbook",
                "document_number": "HB-1",
            },
        ),
        SearchRecord(
            record_id="r2",
            fields={
                "chunk_id": "hb-002",
                "heading": "Travel",
                "content": "Travel expenses require manager approval before booking.",
                "document_name": "Employee Handbook",
                "document_number": "HB-1",
            },
        ),
        SearchRecord(
            record_id="r3",
            fields={
                "chunk_id": "sec-001",
                "heading": "Badges",
                "content": "Lost security badge must be reported to the security desk.",
                "document_name": "Security Policy",
                "document_number": "SP-4",
            },
        ),
    ]
