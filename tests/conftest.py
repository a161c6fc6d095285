"""Shared fixtures."""

from __future__ import annotations

import pytest

from helpers import small_document
from invsim.dataset import load_dataset, parse_dataset
from invsim.store import ReferenceDataStore


@pytest.fixture
def small_store() -> ReferenceDataStore:
    return ReferenceDataStore(parse_dataset(small_document()))


@pytest.fixture(scope="session")
def bundled_store() -> ReferenceDataStore:
    return ReferenceDataStore(load_dataset())
