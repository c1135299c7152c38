import json
from pathlib import Path

import pytest

from harness.bench.errors import InvalidSeed, QueryError
from harness.bench.fixtures import FIXTURE_KEYS, FixtureModeManager, StaticFixtureStore
from harness.bench.types import FixtureMode


def test_static_store_is_versioned(store: StaticFixtureStore) -> None:
    assert isinstance(store.version, int)
    assert store.get("users.validUser")["username"] == "johndoe"
    with pytest.raises(QueryError):
        store.get("users.nobody")


def test_static_store_returns_copies(store: StaticFixtureStore) -> None:
    user = store.get("users.validUser")
    user["username"] = "mutated"
    assert store.get("users.validUser")["username"] == "johndoe"


def test_missing_store_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        StaticFixtureStore.load(str(tmp_path / "missing.yaml"))


def test_static_mode_is_default_and_stable(manager: FixtureModeManager, store: StaticFixtureStore) -> None:
    assert manager.mode is FixtureMode.STATIC
    first = json.dumps(manager.get_user("valid"), sort_keys=True)
    second = json.dumps(manager.get_user("valid"), sort_keys=True)
    assert first == second
    assert manager.get_user() == store.get("users.validUser")
    assert manager.get_user("invalid") == store.get("users.invalidUser")
    assert manager.get_login_credentials() == {"username": "admin", "password": "password123"}
    assert manager.get_todo("completed")["completed"] is True


def test_activate_builds_cache_for_every_key(manager: FixtureModeManager) -> None:
    manager.activate(seed=5)
    assert manager.is_random
    assert set(manager._cache) == set(FIXTURE_KEYS)


def test_random_mode_returns_cached_values(manager: FixtureModeManager, store: StaticFixtureStore) -> None:
    manager.activate()
    user = manager.get_user()
    assert user == manager.get_user()
    assert user != store.get("users.validUser")
    assert manager.get_post() == manager.get_post()
    assert manager.get_headers() == manager.get_headers()


def test_cached_values_are_copies(manager: FixtureModeManager) -> None:
    manager.activate(seed=1)
    manager.get_user()["name"] = "changed"
    assert manager.get_user()["name"] != "changed"


def test_new_activation_gives_new_data(manager: FixtureModeManager) -> None:
    manager.activate()
    first = manager.get_user()
    manager.deactivate()
    assert manager.mode is FixtureMode.STATIC
    manager.activate()
    assert manager.get_user() != first


def test_seed_42_twice_reproduces_bundles(manager: FixtureModeManager) -> None:
    assert manager.seed(42) == 42
    manager.activate()
    first = manager.snapshot()
    manager.deactivate()
    manager.seed(42)
    manager.activate()
    assert manager.snapshot() == first


def test_seed_without_value_is_random_and_returned(manager: FixtureModeManager) -> None:
    seed = manager.seed()
    assert isinstance(seed, int) and seed > 0
    assert manager.seed_value == seed


def test_invalid_seed_is_fatal_to_activate(manager: FixtureModeManager) -> None:
    with pytest.raises(InvalidSeed):
        manager.activate(seed="not-a-number")
    assert manager.mode is FixtureMode.STATIC


def test_reset_only_acts_in_random_mode(manager: FixtureModeManager) -> None:
    assert manager.reset() is None
    assert manager.mode is FixtureMode.STATIC

    manager.activate(seed=3)
    before = manager.get_user()
    seed = manager.reset()
    assert isinstance(seed, int)
    assert manager.is_random
    assert manager.get_user() != before


def test_random_variants(manager: FixtureModeManager, store: StaticFixtureStore) -> None:
    manager.activate(seed=11)
    invalid = manager.get_user("invalid")
    assert invalid["name"] == ""
    assert invalid["website"] == "not-a-url"
    assert manager.get_todo("completed")["completed"] is True
    assert manager.get_post("update") != manager.get_post("valid")

    auth = manager.get_headers("auth")
    assert auth["Authorization"] == store.get("headers.authHeaders")["Authorization"]
    assert auth["X-Request-ID"] == manager.get_headers()["X-Request-ID"]

    errors = manager.get_error_scenarios()
    assert errors["notFound"] == store.get("errorScenarios.notFound")
    assert errors["invalidData"]["sqlInjection"].startswith("'; DROP")


def test_static_only_accessors_ignore_mode(manager: FixtureModeManager, store: StaticFixtureStore) -> None:
    manager.activate(seed=2)
    assert manager.get_endpoints() == store.get("endpoints")
    assert manager.get_expected_responses() == store.get("expectedResponses")
    assert manager.get_performance_data() == store.get("performance")


def test_fresh_and_bulk_data_bypass_the_cache(manager: FixtureModeManager) -> None:
    manager.activate(seed=9)
    assert manager.get_fresh_random_data("user") != manager.get_user()
    assert set(manager.get_fresh_random_data("login")) == {"username", "password"}
    assert "username" in manager.get_fresh_random_data("unknown")
    assert len(manager.get_bulk_random_data("todos", 4)) == 4


def test_to_json_reports_mode(manager: FixtureModeManager) -> None:
    static = json.loads(manager.to_json())
    assert static["mode"] == "static" and static["seed"] is None
    manager.activate(seed=77)
    random_ = json.loads(manager.to_json())
    assert random_["mode"] == "random" and random_["seed"] == 77
