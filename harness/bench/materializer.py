import json
import logging
from typing import Optional

from harness.bench.data_gen import DataGenerator
from harness.bench.placeholders import PlaceholderEngine, is_passthrough
from harness.bench.sentinels import SentinelEngine
from harness.bench.types import MaterializedBody

logger = logging.getLogger(__name__)


def normalize_quotes(template: str) -> str:
    """Turn a single-quoted template (the form Gherkin step strings use) into JSON quoting.

    Only templates with no double quotes at all are rewritten, so apostrophes
    inside ordinary JSON strings are left alone.
    """
    if "'" in template and '"' not in template:
        return template.replace("'", '"')
    return template


class BodyMaterializer:
    """Placeholder pass, then field-sentinel pass, then a JSON parse.

    A body that does not parse is not an error: it is returned as raw text with
    ``ok=False`` so the HTTP layer can send it as-is.  Single-quoted templates
    are read as JSON only when the double-quoted form parses; otherwise the
    original text is substituted and sent untouched.
    """

    def __init__(self, generator: DataGenerator, field_overrides: bool = True) -> None:
        self.placeholders = PlaceholderEngine(generator)
        self.sentinels = SentinelEngine(generator)
        self.field_overrides = field_overrides

    def render(self, template: Optional[str]) -> Optional[str]:
        if is_passthrough(template):
            return template
        text = self.placeholders.substitute(template)
        if self.field_overrides:
            text = self.sentinels.apply_field_overrides(text)
        if text != template:
            logger.debug("Random body transformation applied:\n  original:  %s\n  processed: %s", template, text)
        return text

    def materialize(self, template: Optional[str]) -> MaterializedBody:
        if is_passthrough(template):
            return MaterializedBody(body=None, ok=False, text=template)

        normalized = normalize_quotes(template)
        if normalized != template:
            text = self.render(normalized)
            try:
                return MaterializedBody(body=json.loads(text), ok=True, text=text)
            except json.JSONDecodeError:
                logger.debug("Single-quoted body is not JSON; keeping the original quoting")

        text = self.render(template)
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Body is not JSON (%s); sending it as raw text", e)
            return MaterializedBody(body=text, ok=False, text=text)
        return MaterializedBody(body=document, ok=True, text=text)
