import json

from behave import given, when, then

from harness.bench import json_query


def _read_fixture(context, name):
    fixtures = context.fixtures
    readers = {
        "user": fixtures.get_user,
        "invalid user": lambda: fixtures.get_user("invalid"),
        "post": fixtures.get_post,
        "comment": fixtures.get_comment,
        "todo": fixtures.get_todo,
        "completed todo": lambda: fixtures.get_todo("completed"),
        "album": fixtures.get_album,
        "photo": fixtures.get_photo,
        "login credentials": fixtures.get_login_credentials,
        "auth payload": fixtures.get_auth_payload,
        "headers": fixtures.get_headers,
        "auth headers": lambda: fixtures.get_headers("auth"),
    }
    if name not in readers:
        raise AssertionError(f"Unknown fixture {name!r}; expected one of {sorted(readers)}")
    return readers[name]()


def _field(context, query):
    return json_query.resolve(context.materialized.require_document(), query)


@given("random test data is enabled")
def step_enable_random(context):
    context.fixtures.activate()


@given("random test data is enabled with seed {seed}")
def step_enable_random_seeded(context, seed):
    context.fixtures.activate(seed=seed)


@given("static test data is used")
def step_use_static(context):
    context.fixtures.deactivate()


@when("I materialize the request body")
def step_materialize(context):
    context.materialized = context.materializer.materialize(context.text)


@when('I read the "{name}" fixture')
def step_read_fixture(context, name):
    context.fixture_reads = getattr(context, "fixture_reads", {})
    context.fixture_reads[name] = json.dumps(_read_fixture(context, name), sort_keys=True)


@when("I reset the random test data")
def step_reset_random(context):
    context.reset_seed = context.fixtures.reset()


@then("the materialized body should be a JSON document")
def step_body_is_document(context):
    assert context.materialized.ok, f"Body did not parse: {context.materialized.text!r}"


@then("the materialized body should be sent as raw text")
def step_body_is_raw(context):
    assert not context.materialized.ok, "Body unexpectedly parsed as JSON"
    assert isinstance(context.materialized.body, str)


@then('field "{query}" should be an integer between {low:d} and {high:d}')
def step_field_int_range(context, query, low, high):
    value = _field(context, query)
    assert isinstance(value, int) and not isinstance(value, bool), f"{query} is not an integer: {value!r}"
    assert low <= value <= high, f"{query}={value} not in [{low}, {high}]"


@then('field "{query}" should be a non-empty string')
def step_field_non_empty(context, query):
    value = _field(context, query)
    assert isinstance(value, str) and value.strip(), f"{query} is not a non-empty string: {value!r}"


@then('field "{query}" should be a boolean')
def step_field_bool(context, query):
    value = _field(context, query)
    assert isinstance(value, bool), f"{query} is not a boolean: {value!r}"


@then('field "{query}" should be one of "{choices}"')
def step_field_choice(context, query, choices):
    value = _field(context, query)
    allowed = [c.strip() for c in choices.split(",")]
    assert value in allowed, f"{query}={value!r} not in {allowed}"


@then('field "{query}" should not be "{literal}"')
def step_field_not_literal(context, query, literal):
    value = _field(context, query)
    assert value != literal, f"{query} still holds {literal!r}"


@then('fields "{first}" and "{second}" should be equal')
def step_fields_equal(context, first, second):
    a, b = _field(context, first), _field(context, second)
    assert a == b, f"{first}={a!r} differs from {second}={b!r}"


@then('reading the "{name}" fixture again should return the same data')
def step_fixture_stable(context, name):
    again = json.dumps(_read_fixture(context, name), sort_keys=True)
    assert again == context.fixture_reads[name], f"{name} fixture changed between reads"


@then('reading the "{name}" fixture again should return different data')
def step_fixture_changed(context, name):
    again = json.dumps(_read_fixture(context, name), sort_keys=True)
    assert again != context.fixture_reads[name], f"{name} fixture did not change"


@then('the "{name}" fixture should come from the static store')
def step_fixture_static(context, name):
    assert not context.fixtures.is_random, "Random test data is enabled"
    expected = {
        "user": "users.validUser",
        "post": "posts.validPost",
        "login credentials": "credentials.login",
    }[name]
    assert _read_fixture(context, name) == context.fixture_store.get(expected)


@then("the fixtures should use seed {seed:d}")
def step_fixture_seed(context, seed):
    assert context.fixtures.seed_value == seed, f"Seed is {context.fixtures.seed_value}, expected {seed}"
