from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from harness.bench.errors import MalformedTemplate


class ValueKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"   # epoch milliseconds

    @property
    def bare_allowed(self) -> bool:
        return self is not ValueKind.STRING


class FixtureMode(str, Enum):
    STATIC = "static"
    RANDOM = "random"


@dataclass(frozen=True)
class PlaceholderToken:
    name: str          # catalog key, e.g. "RANDOM_EMAIL"
    generator: str     # DataGenerator kind
    kind: ValueKind


@dataclass(frozen=True)
class FieldSentinel:
    field: str         # JSON key matched case-insensitively
    generator: str     # DataGenerator kind


@dataclass
class MaterializedBody:
    body: Any          # parsed document, or the raw text when ok is False
    ok: bool
    text: Optional[str]

    def require_document(self) -> Any:
        if not self.ok:
            raise MalformedTemplate(f"Body is not a JSON document: {self.text!r}")
        return self.body


@dataclass
class ApiTarget:
    base_url: str
    auth_token: Optional[str]
    username: Optional[str]
    password: Optional[str]
    timeout: float
    retries: int
    verify_tls: bool
    env_name: str              # dev | test | staging | prod
    seed: Optional[int]        # TEST_DATA_SEED, if set
    report_json_path: Optional[str]
    report_console: bool
    env: Dict[str, Any]        # snapshot of relevant env vars (token masked)
