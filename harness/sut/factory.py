import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from harness.bench.data_gen import coerce_seed
from harness.bench.types import ApiTarget

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"

_BOOL_TRUE = {"true", "1", "yes", "y", "on"}
_ENV_NAMES = {"dev", "test", "staging", "prod"}


def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() in _BOOL_TRUE


def _as_number(name: str, value: Any, cast):
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


class ApiTargetFactory:
    """Resolve the API under test from ``HARNESS_CONFIG`` YAML defaults plus env vars."""

    def build(self, env: Optional[Mapping[str, str]] = None) -> ApiTarget:
        env = os.environ if env is None else env
        # 1) file defaults, if any
        settings: Dict[str, Any] = {}
        config_path = env.get("HARNESS_CONFIG")
        if config_path:
            p = Path(config_path)
            if not p.exists():
                raise FileNotFoundError(f"HARNESS_CONFIG file not found: {p}")
            settings = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

        # 2) env overrides file
        def pick(key: str, default: Any = None) -> Any:
            if env.get(key) not in (None, ""):
                return env[key]
            return settings.get(key, default)

        base_url = str(pick("API_BASE_URL", DEFAULT_BASE_URL)).strip().rstrip("/")
        auth_token = pick("API_TOKEN", "test-token")
        env_name = str(pick("ENV", "test")).lower()
        if env_name not in _ENV_NAMES:
            raise ValueError(f"ENV must be one of {sorted(_ENV_NAMES)}, got {env_name!r}")

        retries = _as_number("API_RETRIES", pick("API_RETRIES", 3), int)
        if retries < 1:
            raise ValueError(f"API_RETRIES must be at least 1, got {retries}")

        seed = pick("TEST_DATA_SEED")
        if seed is not None:
            seed = coerce_seed(seed)

        # 3) snapshot for reports, with secrets masked
        env_snapshot = {
            "API_BASE_URL": base_url,
            "API_TOKEN": "***" if auth_token else None,
            "ENV": env_name,
            "TEST_DATA_SEED": seed,
            "HARNESS_CONFIG": config_path,
        }

        return ApiTarget(
            base_url=base_url,
            auth_token=auth_token,
            username=pick("API_USERNAME", "testuser"),
            password=pick("API_PASSWORD", "testpass"),
            timeout=_as_number("API_TIMEOUT", pick("API_TIMEOUT", 30), float),
            retries=retries,
            verify_tls=_as_bool(pick("HTTP_VERIFY_TLS", "true")),
            env_name=env_name,
            seed=seed,
            report_json_path=pick("REPORT_JSON_PATH"),
            report_console=_as_bool(pick("REPORT_CONSOLE", "false")),
            env=env_snapshot,
        )
