import json
import re
import uuid
from datetime import date, datetime

import pytest

from harness.bench.data_gen import KINDS, DataGenerator
from harness.bench.placeholders import BY_NAME, CATALOG, PlaceholderEngine
from harness.bench.types import ValueKind


@pytest.fixture
def engine(generator: DataGenerator) -> PlaceholderEngine:
    return PlaceholderEngine(generator)


def _is_int_text(text: str) -> bool:
    return re.fullmatch(r"-?\d+", text) is not None


def test_catalog_is_closed_over_generators() -> None:
    assert len(BY_NAME) == len(CATALOG)
    for token in CATALOG:
        assert token.generator in KINDS, token.name


@pytest.mark.parametrize("token", CATALOG, ids=lambda t: t.name)
def test_quoted_placeholder_yields_literal_of_its_kind(engine: PlaceholderEngine, token) -> None:
    out = engine.substitute(f'"{token.name}"')
    value = json.loads(out)
    assert isinstance(value, str) and value
    if token.kind in (ValueKind.INTEGER, ValueKind.TIMESTAMP):
        assert _is_int_text(value)
    elif token.kind is ValueKind.BOOLEAN:
        assert value in ("true", "false")


def test_value_ranges_and_formats(engine: PlaceholderEngine) -> None:
    for _ in range(50):
        assert 1 <= int(json.loads(engine.substitute('"RANDOM_NUMBER"'))) <= 1000
        assert 1 <= int(json.loads(engine.substitute('"RANDOM_ID"'))) <= 999_999
    assert "@" in json.loads(engine.substitute('"RANDOM_EMAIL"'))
    uuid.UUID(json.loads(engine.substitute('"RANDOM_UUID"')))
    date.fromisoformat(json.loads(engine.substitute('"RANDOM_DATE"')))
    datetime.fromisoformat(json.loads(engine.substitute('"RANDOM_DATETIME"')).replace("Z", "+00:00"))
    assert json.loads(engine.substitute('"RANDOM_STATUS"')) in {"active", "inactive", "pending"}
    assert re.fullmatch(r"\d+\.\d{2}", json.loads(engine.substitute('"RANDOM_PRICE"')))


def test_bare_non_string_placeholders_become_json_scalars(engine: PlaceholderEngine) -> None:
    out = engine.substitute(
        '{"age": RANDOM_NUMBER, "id": RANDOM_ID, "ok": RANDOM_BOOLEAN, "at": RANDOM_TIMESTAMP}'
    )
    doc = json.loads(out)
    assert isinstance(doc["age"], int) and 1 <= doc["age"] <= 1000
    assert isinstance(doc["id"], int)
    assert isinstance(doc["ok"], bool)
    assert isinstance(doc["at"], int)


def test_bare_string_placeholders_are_left_alone(engine: PlaceholderEngine) -> None:
    template = '{"email": RANDOM_EMAIL, "greeting": "hello RANDOM_NAME"}'
    assert engine.substitute(template) == template


def test_single_quotes_are_normalized_to_double(engine: PlaceholderEngine) -> None:
    out = engine.substitute("{\"name\": 'RANDOM_NAME'}")
    name = json.loads(out)["name"]
    assert name
    assert out == '{"name": ' + json.dumps(name, ensure_ascii=False) + "}"


def test_longer_names_are_not_clobbered_by_random(engine: PlaceholderEngine) -> None:
    out = engine.substitute('{"u": "RANDOM_USERNAME", "w": "RANDOM", "x": RANDOM_IDS}')
    assert "_USERNAME" not in out
    assert "RANDOM_IDS" in out
    doc = json.loads(out.replace("RANDOM_IDS", "0"))
    assert doc["u"] and doc["w"]


def test_prefixed_and_suffixed_tokens_do_not_match(engine: PlaceholderEngine) -> None:
    template = '{"a": MY_RANDOM_ID, "b": RANDOM_IDx, "c": "random"}'
    assert engine.substitute(template) == template


def test_repeated_placeholder_reuses_one_value(engine: PlaceholderEngine) -> None:
    doc = json.loads(engine.substitute('{"a": RANDOM_ID, "b": "RANDOM_ID", "c": RANDOM_ID}'))
    assert doc["a"] == int(doc["b"]) == doc["c"]


def test_values_are_fresh_per_call(engine: PlaceholderEngine) -> None:
    values = {engine.substitute('"RANDOM_TOKEN"') for _ in range(5)}
    assert len(values) == 5


def test_unknown_placeholder_is_untouched(engine: PlaceholderEngine) -> None:
    template = '{"x": "RANDOM_FOO", "y": RANDOM_BAR}'
    assert engine.substitute(template) == template


def test_generated_values_are_json_escaped() -> None:
    class QuoteGenerator(DataGenerator):
        def generate(self, kind):
            return 'say "hi"\nnow'

    engine = PlaceholderEngine(QuoteGenerator())
    assert json.loads(engine.substitute('{"t": "RANDOM_TITLE"}'))["t"] == 'say "hi"\nnow'


@pytest.mark.parametrize("template", [None, "", "null"])
def test_empty_templates_pass_through(engine: PlaceholderEngine, template) -> None:
    assert engine.substitute(template) == template
