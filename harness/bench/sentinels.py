import json
import logging
import re
from typing import Dict, Optional

from harness.bench.data_gen import DataGenerator
from harness.bench.placeholders import is_passthrough
from harness.bench.types import FieldSentinel

logger = logging.getLogger(__name__)

SENTINEL_VALUE = "random"

FIELD_SENTINELS = (
    FieldSentinel("username", "username"),
    FieldSentinel("password", "password"),
    FieldSentinel("email", "email"),
    FieldSentinel("name", "full_name"),
    FieldSentinel("title", "sentence"),
    FieldSentinel("body", "paragraph"),
    FieldSentinel("phone", "phone"),
    FieldSentinel("address", "street_address"),
    FieldSentinel("city", "city"),
    FieldSentinel("company", "company"),
    FieldSentinel("job", "job"),
    FieldSentinel("website", "domain"),
)

BY_FIELD: Dict[str, FieldSentinel] = {rule.field: rule for rule in FIELD_SENTINELS}

_FIELD_RE = re.compile(
    r"(?P<kq>[\"'])(?P<field>" + "|".join(re.escape(f) for f in BY_FIELD) + r")(?P=kq)"
    r"\s*:\s*"
    r"(?P<vq>[\"'])" + SENTINEL_VALUE + r"(?P=vq)",
    re.IGNORECASE,
)


class SentinelEngine:
    """Replace ``"<field>": "random"`` values for the known field names.

    Runs after placeholder substitution.  One value is generated per field
    name per call; the key keeps its original spelling and the value becomes a
    JSON string literal.
    """

    def __init__(self, generator: DataGenerator) -> None:
        self.generator = generator

    def apply_field_overrides(self, template: Optional[str]) -> Optional[str]:
        if is_passthrough(template):
            return template

        values: Dict[str, str] = {}

        def replace(match: "re.Match[str]") -> str:
            rule = BY_FIELD[match.group("field").lower()]
            if rule.field not in values:
                values[rule.field] = str(self.generator.generate(rule.generator))
            key = match.group("field")
            return f"\"{key}\": {json.dumps(values[rule.field], ensure_ascii=False)}"

        result = _FIELD_RE.sub(replace, template)
        if values:
            logger.debug("Applied field overrides: %s", ", ".join(sorted(values)))
        return result
