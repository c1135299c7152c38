import json

import pytest

from harness.bench.data_gen import DataGenerator
from harness.bench.errors import MalformedTemplate
from harness.bench.materializer import BodyMaterializer, normalize_quotes


@pytest.fixture
def materializer(generator: DataGenerator) -> BodyMaterializer:
    return BodyMaterializer(generator)


def test_title_and_user_id_scenario(materializer: BodyMaterializer) -> None:
    result = materializer.materialize('{"title": "RANDOM_TITLE", "userId": RANDOM_NUMBER}')
    assert result.ok
    assert isinstance(result.body["title"], str) and result.body["title"]
    assert isinstance(result.body["userId"], int) and 1 <= result.body["userId"] <= 1000
    assert json.loads(result.text) == result.body


def test_placeholders_then_sentinels(materializer: BodyMaterializer) -> None:
    result = materializer.materialize('{"username": "random", "email": "RANDOM_EMAIL", "status": "RANDOM_STATUS"}')
    doc = result.require_document()
    assert doc["username"] != "random"
    assert "@" in doc["email"]
    assert doc["status"] in {"active", "inactive", "pending"}


def test_field_overrides_can_be_disabled(generator: DataGenerator) -> None:
    result = BodyMaterializer(generator, field_overrides=False).materialize('{"username": "random"}')
    assert result.body == {"username": "random"}


def test_single_quoted_template_is_normalized(materializer: BodyMaterializer) -> None:
    result = materializer.materialize("{'title': 'RANDOM_TITLE', 'userId': RANDOM_ID}")
    assert result.ok
    assert isinstance(result.body["userId"], int)


def test_non_json_falls_back_to_raw_text(materializer: BodyMaterializer, caplog) -> None:
    result = materializer.materialize("name=RANDOM_NAME&id=RANDOM_ID")
    assert not result.ok
    assert result.body == result.text
    assert result.text.startswith("name=RANDOM_NAME&id=")
    assert "RANDOM_ID" not in result.text
    assert "raw text" in caplog.text
    with pytest.raises(MalformedTemplate):
        result.require_document()


@pytest.mark.parametrize("template", [None, "", "null"])
def test_empty_templates(materializer: BodyMaterializer, template) -> None:
    result = materializer.materialize(template)
    assert result.body is None and not result.ok and result.text == template


def test_normalize_quotes_leaves_mixed_quoting_alone() -> None:
    assert normalize_quotes("{'a': 'b'}") == '{"a": "b"}'
    assert normalize_quotes('{"a": "it\'s"}') == '{"a": "it\'s"}'


def test_raw_text_apostrophes_survive(materializer: BodyMaterializer) -> None:
    result = materializer.materialize("Don't change RANDOM_ID")
    assert not result.ok
    assert result.text.startswith("Don't change ")
    assert result.text.split()[-1].isdigit()


def test_single_quoted_non_json_is_sent_as_written(materializer: BodyMaterializer) -> None:
    result = materializer.materialize("it's a 'plain' note")
    assert not result.ok
    assert result.text == "it's a 'plain' note"
