import logging

import parse
from behave import given, when, then, register_type

from harness.bench import json_query
from harness.bench.errors import QueryError
from harness.http.executor import auth_headers, concurrent_get, parse_headers, response_data

logger = logging.getLogger(__name__)


@parse.with_pattern(r'[^"]*')
def _parse_str(text):
    return text


@parse.with_pattern(r"[A-Za-z]+")
def _parse_word(text):
    return text


register_type(Str=_parse_str, Word=_parse_word)


def _require_response(context):
    if getattr(context, "response", None) is None:
        raise AssertionError("No response available. Execute an API request first.")
    return context.response


def _require_executor(context):
    if getattr(context, "executor", None) is None:
        raise AssertionError("No HTTP client for this scenario. Tag it with @api.")
    return context.executor


def _execute(context, method, url_path, headers="", body=""):
    merged = dict(getattr(context, "custom_headers", {}) or {})
    merged.update(parse_headers(headers))
    context.response = _require_executor(context).execute(method, url_path, headers=merged, body=body)
    context.response_data = response_data(context.response)
    return context.response


def _store_query(context, query, variable):
    if not query or not variable:
        return
    try:
        value = json_query.resolve(context.response_data, query)
    except QueryError as e:
        logger.warning("Failed to extract %s from response: %s", query, e)
        return
    context.vars[variable] = value
    logger.info("Stored %s = %r", variable, value)


@given("I have a valid API endpoint")
def step_valid_endpoint(context):
    logger.info("API endpoint %s is ready for testing", context.target.base_url)


@given("I set the authorization header")
def step_set_auth_header(context):
    context.custom_headers = auth_headers(context.target.auth_token)


@when(
    'I execute {method:Word} REST API with url path "{url_path:Str}", headers "{headers:Str}", '
    'request body "{body:Str}", expect status "{status:Str}", store json query "{query:Str}" '
    'result in "{variable:Str}"'
)
def step_execute_rest_api(context, method, url_path, headers, body, status, query, variable):
    response = _execute(context, method, url_path, headers=headers, body=body)
    if status:
        expected = int(status)
        assert response.status_code == expected, (
            f"Expected status code {expected}, got {response.status_code}"
        )
    _store_query(context, query, variable)


@when('I execute {method:Word} REST API with url path "{url_path:Str}"')
def step_execute_simple(context, method, url_path):
    _execute(context, method, url_path)


@when('I execute {method:Word} REST API with url path "{url_path:Str}" and body "{body:Str}"')
def step_execute_with_body(context, method, url_path, body):
    _execute(context, method, url_path, body=body)


@when('I create a post from the "{kind:Word}" post fixture')
def step_create_post_from_fixture(context, kind):
    post = context.fixtures.get_post(kind)
    response = _require_executor(context).client.post("/posts", json=post)
    context.response = response
    context.response_data = response_data(response)
    logger.info("Created post with ID: %s", context.response_data.get("id"))


def _send_burst(context, count, url_path):
    target = context.target
    headers = dict(getattr(context, "custom_headers", {}) or {})
    responses, elapsed_ms = concurrent_get(
        url_path,
        count,
        base_url=target.base_url,
        headers=headers,
        timeout=target.timeout,
        verify=target.verify_tls,
    )
    context.burst_responses = responses
    context.burst_ms = elapsed_ms
    context.response = responses[0]
    context.response_data = response_data(responses[0])


@when('I send {count:d} concurrent GET requests to "{url_path:Str}"')
def step_concurrent_get(context, count, url_path):
    _send_burst(context, count, url_path)


@when("I send the configured concurrent GET requests")
def step_concurrent_get_configured(context):
    perf = context.fixtures.get_performance_data()
    _send_burst(context, int(perf["concurrentRequests"]), perf["endpoint"])


def _require_burst(context):
    if getattr(context, "burst_responses", None) is None:
        raise AssertionError("No concurrent requests were sent in this scenario.")
    return context.burst_responses


@then("all requests should complete within {max_ms:d} milliseconds")
def step_burst_within(context, max_ms):
    _require_burst(context)
    assert context.burst_ms < max_ms, f"Requests took {context.burst_ms:.0f}ms, limit {max_ms}ms"


@then("all requests should complete within the configured time")
def step_burst_within_configured(context):
    step_burst_within(context, int(context.fixtures.get_performance_data()["maxResponseTimeMs"]))


@then('all responses should have status "{status:Str}"')
def step_burst_status(context, status):
    statuses = [r.status_code for r in _require_burst(context)]
    assert all(s == int(status) for s in statuses), f"Expected every status {status}, got {statuses}"


@then('I validate status code is "{status:Str}"')
def step_validate_status(context, status):
    actual = _require_response(context).status_code
    assert actual == int(status), f"Expected status code {status}, got {actual}"


@then('the response should contain fields "{fields:Str}"')
def step_response_fields(context, fields):
    _require_response(context)
    data = context.response_data
    items = data if isinstance(data, list) else [data]
    assert items, "Response is empty"
    required = [f.strip() for f in fields.split(",") if f.strip()]
    for item in items:
        missing = [f for f in required if f not in item]
        assert not missing, f"Missing fields {missing} in {item!r}"


@then('the response field "{query:Str}" should equal "{expected:Str}"')
def step_response_field_equals(context, query, expected):
    actual = json_query.resolve(context.response_data, query)
    assert str(actual) == expected, f"{query}: expected {expected!r}, got {actual!r}"


@then('the response should echo the "{kind:Word}" post fixture')
def step_response_echoes_fixture(context, kind):
    post = context.fixtures.get_post(kind)
    for key in ("title", "body", "userId"):
        assert context.response_data.get(key) == post[key], (
            f"{key}: expected {post[key]!r}, got {context.response_data.get(key)!r}"
        )


@then('the stored variable "{variable:Str}" should not be empty')
def step_stored_variable(context, variable):
    assert context.vars.get(variable) not in (None, "", [], {}), f"Variable {variable} is empty"
