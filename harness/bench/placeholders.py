"""Placeholder substitution for request-body templates.

A template is plain text (usually JSON) that may contain catalog tokens such
as ``RANDOM_EMAIL``.  The engine walks the text once with a single compiled
pattern and classifies every token-shaped run as

* a quoted placeholder: ``"RANDOM_X"`` or ``'RANDOM_X'``, always rendered as a
  double-quoted JSON string literal;
* a bare placeholder: ``RANDOM_X`` on word boundaries, rendered as a JSON
  scalar, but only for kinds that are not string-like;
* anything else, left exactly as written.

Tokens are matched whole, so ``RANDOM`` never eats the head of
``RANDOM_USERNAME``.  Within one call every occurrence of the same placeholder
receives the same generated value.  Generated values are not re-scanned.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from harness.bench.data_gen import DataGenerator
from harness.bench.types import PlaceholderToken, ValueKind

logger = logging.getLogger(__name__)

S, I, B, T = ValueKind.STRING, ValueKind.INTEGER, ValueKind.BOOLEAN, ValueKind.TIMESTAMP

CATALOG = (
    # basic
    PlaceholderToken("RANDOM", "word", S),
    PlaceholderToken("RANDOM_STRING", "word", S),
    PlaceholderToken("RANDOM_NUMBER", "number", I),
    PlaceholderToken("RANDOM_ID", "id", I),
    # identity
    PlaceholderToken("RANDOM_USERNAME", "username", S),
    PlaceholderToken("RANDOM_PASSWORD", "password", S),
    PlaceholderToken("RANDOM_EMAIL", "email", S),
    PlaceholderToken("RANDOM_FIRSTNAME", "first_name", S),
    PlaceholderToken("RANDOM_LASTNAME", "last_name", S),
    PlaceholderToken("RANDOM_NAME", "full_name", S),
    PlaceholderToken("RANDOM_PHONE", "phone", S),
    PlaceholderToken("RANDOM_WEBSITE", "domain", S),
    # address
    PlaceholderToken("RANDOM_ADDRESS", "street_address", S),
    PlaceholderToken("RANDOM_CITY", "city", S),
    PlaceholderToken("RANDOM_STATE", "state", S),
    PlaceholderToken("RANDOM_COUNTRY", "country", S),
    PlaceholderToken("RANDOM_ZIPCODE", "zipcode", S),
    # content
    PlaceholderToken("RANDOM_TITLE", "sentence", S),
    PlaceholderToken("RANDOM_TEXT", "paragraph", S),
    PlaceholderToken("RANDOM_SENTENCE", "sentence", S),
    PlaceholderToken("RANDOM_WORD", "word", S),
    PlaceholderToken("RANDOM_WORDS", "words", S),
    # date and time
    PlaceholderToken("RANDOM_DATE", "date", S),
    PlaceholderToken("RANDOM_DATETIME", "datetime", S),
    PlaceholderToken("RANDOM_TIMESTAMP", "timestamp", T),
    # company
    PlaceholderToken("RANDOM_COMPANY", "company", S),
    PlaceholderToken("RANDOM_JOB", "job", S),
    PlaceholderToken("RANDOM_DEPARTMENT", "department", S),
    # internet
    PlaceholderToken("RANDOM_URL", "url", S),
    PlaceholderToken("RANDOM_DOMAIN", "domain", S),
    PlaceholderToken("RANDOM_IP", "ip", S),
    PlaceholderToken("RANDOM_UUID", "uuid", S),
    # financial
    PlaceholderToken("RANDOM_PRICE", "price", S),
    PlaceholderToken("RANDOM_CURRENCY", "currency", S),
    PlaceholderToken("RANDOM_ACCOUNT", "account", S),
    # boolean and choices
    PlaceholderToken("RANDOM_BOOLEAN", "boolean", B),
    PlaceholderToken("RANDOM_STATUS", "status", S),
    PlaceholderToken("RANDOM_PRIORITY", "priority", S),
    # api tokens
    PlaceholderToken("RANDOM_TOKEN", "token", S),
    PlaceholderToken("RANDOM_KEY", "key", S),
    PlaceholderToken("RANDOM_CODE", "code", S),
)

BY_NAME: Dict[str, PlaceholderToken] = {token.name: token for token in CATALOG}

_NAME = r"RANDOM(?:_[A-Z0-9]+)*"
_TOKEN_RE = re.compile(
    rf"(?P<quote>[\"'])(?P<quoted>{_NAME})(?P=quote)"
    rf"|\b(?P<bare>{_NAME})\b"
)


def is_passthrough(template: Optional[str]) -> bool:
    return not template or template == "null"


def render_quoted(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return json.dumps(str(value), ensure_ascii=False)


def render_bare(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PlaceholderEngine:
    def __init__(self, generator: DataGenerator) -> None:
        self.generator = generator

    def substitute(self, template: Optional[str]) -> Optional[str]:
        if is_passthrough(template):
            return template

        values: Dict[str, Any] = {}

        def value_for(token: PlaceholderToken) -> Any:
            if token.name not in values:
                values[token.name] = self.generator.generate(token.generator)
            return values[token.name]

        def replace(match: "re.Match[str]") -> str:
            name = match.group("quoted") or match.group("bare")
            token = BY_NAME.get(name)
            if token is None:
                logger.debug("Leaving unknown placeholder %s untouched", name)
                return match.group(0)
            if match.group("quoted"):
                return render_quoted(value_for(token))
            if not token.kind.bare_allowed:
                return match.group(0)
            return render_bare(value_for(token))

        result = _TOKEN_RE.sub(replace, template)
        if values:
            logger.debug("Substituted placeholders: %s", ", ".join(sorted(values)))
        return result
