from __future__ import annotations

import itertools

import pytest

from ledger_core.operations import seed_default_state
from ledger_core.presenter import RecordingPresenter
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage, LedgerRepository


@pytest.fixture
def state():
    return seed_default_state()


@pytest.fixture
def storage(tmp_path):
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def repository(storage):
    return LedgerRepository(storage)


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def clock():
    return itertools.count(1_700_000_000_000).__next__


@pytest.fixture
def service(repository, presenter, clock):
    return LedgerService(repository, presenter, clock=clock)
