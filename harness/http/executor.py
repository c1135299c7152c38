"""HTTP execution for generic REST steps.

Bodies go through the scenario's :class:`BodyMaterializer` first: a parsed
document is sent as JSON, anything else as raw content (or as form fields when
``form=True``). Concurrent GET bursts use an ``httpx.AsyncClient``.
"""

import asyncio
import base64
import json
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

import httpx

from harness.bench.materializer import BodyMaterializer
from harness.bench.placeholders import is_passthrough, render_bare

logger = logging.getLogger(__name__)

T = TypeVar("T")

METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def parse_headers(headers: Optional[str]) -> Dict[str, str]:
    if not headers or headers in ("null", "{}"):
        return {}
    try:
        parsed = json.loads(headers.replace("'", '"'))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse headers: %s. Using empty headers.", e)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Headers must be a JSON object, got %s. Using empty headers.", type(parsed).__name__)
        return {}
    return {str(k): str(v) for k, v in parsed.items()}


def auth_headers(token: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        **(extra or {}),
    }


def basic_auth_headers(username: str, password: str) -> Dict[str, str]:
    credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {credentials}"}


def response_data(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return {}
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Failed to parse JSON response: %s", e)
            return {}
    return response.text


def retry(fn: Callable[[], T], retries: int = 3, backoff: float = 1.0,
          sleep: Callable[[float], None] = time.sleep) -> T:
    """Call ``fn`` up to ``retries`` times, doubling the wait after each transport error."""
    for attempt in range(1, retries + 1):
        try:
            return fn()
        except httpx.HTTPError as e:
            if attempt == retries:
                raise
            delay = backoff * (2 ** (attempt - 1))
            logger.warning("Request failed (%s), attempt %d/%d; retrying in %.1fs", e, attempt, retries, delay)
            sleep(delay)
    raise ValueError("retries must be >= 1")


def form_value(value: Any) -> str:
    """Render a document value as a form field, spelling scalars the way JSON does."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return render_bare(value)


def concurrent_get(
    url_path: str,
    count: int,
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 30.0,
    verify: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[List[httpx.Response], float]:
    """Fire ``count`` GET requests at once and return the responses with the wall time in ms."""
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    async def run() -> Tuple[List[httpx.Response], float]:
        async with httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            timeout=timeout,
            verify=verify,
            transport=transport,
        ) as client:
            loop = asyncio.get_running_loop()
            start = loop.time()
            responses = await asyncio.gather(*(client.get(url_path) for _ in range(count)))
            elapsed_ms = (loop.time() - start) * 1000
        return list(responses), elapsed_ms

    logger.info("Sending %d concurrent requests to %s", count, url_path)
    responses, elapsed_ms = asyncio.run(run())
    logger.info("All %d requests completed in %.0fms", count, elapsed_ms)
    return responses, elapsed_ms


class RestExecutor:
    def __init__(self, client: httpx.Client, materializer: BodyMaterializer, retries: int = 1) -> None:
        self.client = client
        self.materializer = materializer
        self.retries = retries

    def execute(
        self,
        method: str,
        url_path: str,
        headers: Any = "",
        body: Optional[str] = "",
        form: bool = False,
    ) -> httpx.Response:
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        header_map = parse_headers(headers) if isinstance(headers, str) else dict(headers or {})
        kwargs: Dict[str, Any] = {"headers": header_map}

        materialized = self.materializer.materialize(body)
        if not is_passthrough(body) and method != "GET":
            if form and materialized.ok and isinstance(materialized.body, dict):
                kwargs["data"] = {k: form_value(v) for k, v in materialized.body.items()}
                header_map.setdefault("Content-Type", "application/x-www-form-urlencoded")
            elif materialized.ok:
                kwargs["json"] = materialized.body
            else:
                kwargs["content"] = materialized.text

        logger.info("Executing %s %s", method, url_path)
        response = retry(lambda: self.client.request(method, url_path, **kwargs), retries=self.retries)
        logger.info("%s request completed with status: %d", method, response.status_code)
        return response
