"""Static and randomized fixture access for one scenario.

Each behave scenario owns a :class:`FixtureModeManager`.  In STATIC mode the
accessors return fixtures from the read-only :class:`StaticFixtureStore`; in
RANDOM mode they return values from a bundle generated once per activation, so
reading ``get_user()`` twice inside a scenario gives the same user.  Callers
always receive copies.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from harness.bench import json_query
from harness.bench.data_gen import DataGenerator, coerce_seed, random_seed
from harness.bench.types import FixtureMode

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path(__file__).resolve().parent.parent / "data" / "api_test_data.yaml"

FIXTURE_KEYS = (
    "validUser",
    "validPost",
    "validComment",
    "validTodo",
    "validAlbum",
    "validPhoto",
    "loginCredentials",
    "authPayload",
    "customHeaders",
    "invalidData",
)


class StaticFixtureStore:
    def __init__(self, data: Dict[str, Any]) -> None:
        self._data = data

    @classmethod
    def load(cls, path: Optional[str] = None) -> "StaticFixtureStore":
        p = Path(path) if path else DEFAULT_STORE_PATH
        if not p.exists():
            raise FileNotFoundError(f"Static fixture file not found: {p}")
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        logger.info("Loaded static fixtures v%s from %s", data.get("version", "?"), p)
        return cls(data)

    @property
    def version(self) -> Any:
        return self._data.get("version")

    def get(self, path: str) -> Any:
        return copy.deepcopy(json_query.resolve(self._data, path))


class FixtureModeManager:
    def __init__(self, store: StaticFixtureStore, generator: Optional[DataGenerator] = None) -> None:
        self.store = store
        self.generator = generator or DataGenerator()
        self.mode = FixtureMode.STATIC
        self._cache: Dict[str, Any] = {}

    @property
    def is_random(self) -> bool:
        return self.mode is FixtureMode.RANDOM

    @property
    def seed_value(self) -> Optional[int]:
        return self.generator.seed_value

    # -- mode transitions --------------------------------------------------

    def seed(self, value: Any = None) -> int:
        """Seed the generator and return the seed actually used.

        ``None`` draws a fresh random seed; anything that is not an integer
        raises :class:`~harness.bench.errors.InvalidSeed`.
        """
        seed_value = random_seed() if value is None else coerce_seed(value)
        self.generator.seed(seed_value)
        logger.info("Test data seeded with: %d", seed_value)
        return seed_value

    def activate(self, seed: Any = None) -> None:
        if seed is not None:
            self.seed(seed)
        elif self.generator.seed_value is None:
            self.seed()
        self.mode = FixtureMode.RANDOM
        self._regenerate()

    def deactivate(self) -> None:
        self.mode = FixtureMode.STATIC
        self._cache = {}

    def reset(self) -> Optional[int]:
        if not self.is_random:
            return None
        seed_value = self.seed()
        self._regenerate()
        return seed_value

    def _regenerate(self) -> None:
        self._cache = self.generator.scenario_bundle()
        logger.debug("Random fixture cache built: %s", ", ".join(self._cache))

    def _cached(self, key: str) -> Any:
        return copy.deepcopy(self._cache[key])

    # -- accessors ---------------------------------------------------------

    def get_user(self, kind: str = "valid") -> Dict[str, Any]:
        if self.is_random:
            if kind == "valid":
                return self._cached("validUser")
            invalid = self._cache["invalidData"]
            return {
                "name": invalid["emptyString"],
                "username": invalid["specialCharacters"],
                "email": invalid["invalidEmail"],
                "phone": invalid["invalidPhone"],
                "website": invalid["invalidURL"],
            }
        return self.store.get("users.validUser" if kind == "valid" else "users.invalidUser")

    def get_post(self, kind: str = "valid") -> Dict[str, Any]:
        if self.is_random:
            return self._cached("validPost") if kind == "valid" else self.generator.post()
        return self.store.get("posts.validPost" if kind == "valid" else "posts.updatePost")

    def get_comment(self) -> Dict[str, Any]:
        return self._cached("validComment") if self.is_random else self.store.get("comments.validComment")

    def get_todo(self, kind: str = "valid") -> Dict[str, Any]:
        if self.is_random:
            todo = self._cached("validTodo")
            if kind != "valid":
                todo["completed"] = True
            return todo
        return self.store.get("todos.validTodo" if kind == "valid" else "todos.completedTodo")

    def get_album(self) -> Dict[str, Any]:
        return self._cached("validAlbum") if self.is_random else self.store.get("albums.validAlbum")

    def get_photo(self) -> Dict[str, Any]:
        return self._cached("validPhoto") if self.is_random else self.store.get("photos.validPhoto")

    def get_login_credentials(self) -> Dict[str, str]:
        return self._cached("loginCredentials") if self.is_random else self.store.get("credentials.login")

    def get_auth_payload(self) -> Dict[str, str]:
        return self._cached("authPayload") if self.is_random else self.store.get("credentials.auth")

    def get_headers(self, kind: str = "custom") -> Dict[str, str]:
        if self.is_random:
            custom = self._cached("customHeaders")
            if kind == "custom":
                return custom
            return {**self.store.get("headers.authHeaders"), **custom}
        return self.store.get("headers.customHeaders" if kind == "custom" else "headers.authHeaders")

    def get_error_scenarios(self) -> Dict[str, Any]:
        scenarios = self.store.get("errorScenarios")
        if self.is_random:
            scenarios["invalidData"] = self._cached("invalidData")
        return scenarios

    # always static
    def get_endpoints(self) -> Dict[str, str]:
        return self.store.get("endpoints")

    def get_expected_responses(self) -> Dict[str, Any]:
        return self.store.get("expectedResponses")

    def get_performance_data(self) -> Dict[str, Any]:
        return self.store.get("performance")

    # -- fresh data (bypasses the cache) -----------------------------------

    def get_fresh_random_data(self, kind: str) -> Dict[str, Any]:
        g = self.generator
        builders = {
            "user": g.user,
            "post": g.post,
            "comment": g.comment,
            "todo": g.todo,
            "album": g.album,
            "photo": g.photo,
            "login": g.login_credentials,
            "auth": g.auth_payload,
            "headers": g.headers,
        }
        return builders.get(kind.lower(), g.user)()

    def get_bulk_random_data(self, kind: str, count: int = 5) -> List[Dict[str, Any]]:
        return self.generator.bulk(kind, count)

    # -- debugging ---------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "seed": self.seed_value if self.is_random else None,
            "user": self.get_user(),
            "post": self.get_post(),
            "comment": self.get_comment(),
            "todo": self.get_todo(),
            "album": self.get_album(),
            "photo": self.get_photo(),
            "loginCredentials": self.get_login_credentials(),
            "authPayload": self.get_auth_payload(),
            "headers": self.get_headers(),
        }

    def to_json(self) -> str:
        return json.dumps(self.snapshot(), indent=2)
