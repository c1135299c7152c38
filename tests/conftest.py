from datetime import datetime, timezone

import pytest

from harness.bench.data_gen import DataGenerator
from harness.bench.fixtures import FixtureModeManager, StaticFixtureStore

ANCHOR = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def generator() -> DataGenerator:
    return DataGenerator(seed=1234, anchor=ANCHOR)


@pytest.fixture(scope="session")
def store() -> StaticFixtureStore:
    return StaticFixtureStore.load()


@pytest.fixture
def manager(store: StaticFixtureStore) -> FixtureModeManager:
    return FixtureModeManager(store, DataGenerator(anchor=ANCHOR))
