"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
(and `tests.*`) namespace when running `pytest` locally without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.agent.audit import AuditRecorder  # noqa: E402
from src.config.settings import Settings  # noqa: E402
from tests.fakes import AUDIT_TABLE, FakeRecordStore  # noqa: E402


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def auditor(store: FakeRecordStore) -> AuditRecorder:
    return AuditRecorder(store, table=AUDIT_TABLE)


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="postgresql://localhost/hr_agent_test", APP_ENV="production")
