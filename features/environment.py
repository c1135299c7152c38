import logging
import os
import time

import httpx

from harness.bench.fixtures import FixtureModeManager, StaticFixtureStore
from harness.bench.materializer import BodyMaterializer
from harness.export.result_sink import ResultSink
from harness.http.executor import DEFAULT_HEADERS, RestExecutor
from harness.sut.factory import ApiTargetFactory

RANDOM_DATA_TAG = "randomTestData"
API_TAG = "api"
SEED_TAG_PREFIX = "seed="

logger = logging.getLogger("harness.scenario")


def _seed_from_tags(tags):
    for tag in tags:
        if tag.startswith(SEED_TAG_PREFIX):
            return tag[len(SEED_TAG_PREFIX):]
    return None


def before_all(context):
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    context.target = ApiTargetFactory().build()
    context.fixture_store = StaticFixtureStore.load(os.getenv("FIXTURE_DATA_PATH"))
    context.result_sink = ResultSink()
    context.scenario_results = []


def before_scenario(context, scenario):
    # Reset per scenario
    context.vars = {}
    context.response = None
    context.response_data = None
    context.started_at = time.monotonic()
    context.http = None
    context.executor = None

    tags = scenario.effective_tags
    context.fixtures = FixtureModeManager(context.fixture_store)
    if RANDOM_DATA_TAG in tags:
        seed = _seed_from_tags(tags)
        context.fixtures.activate(seed=seed if seed is not None else context.target.seed)
    context.materializer = BodyMaterializer(context.fixtures.generator)

    if API_TAG in tags:
        target = context.target
        context.http = httpx.Client(
            base_url=target.base_url,
            headers=DEFAULT_HEADERS,
            timeout=target.timeout,
            verify=target.verify_tls,
        )
        context.executor = RestExecutor(context.http, context.materializer, retries=target.retries)

    logger.info("Starting scenario: %s (%s data)", scenario.name, context.fixtures.mode.value)


def after_scenario(context, scenario):
    status = scenario.status.name
    if status == "passed":
        logger.info("Scenario passed: %s", scenario.name)
    else:
        logger.error("Scenario %s: %s", status, scenario.name)

    context.scenario_results.append({
        "scenario": scenario.name,
        "feature": getattr(context.feature, "filename", None),
        "status": status,
        "fixture_mode": context.fixtures.mode.value,
        "seed": context.fixtures.seed_value if context.fixtures.is_random else None,
        "duration_ms": int((time.monotonic() - context.started_at) * 1000),
    })

    context.fixtures.deactivate()
    if context.http is not None:
        context.http.close()


def after_all(context):
    target = context.target
    report = {
        "env": target.env,
        "static_fixture_version": context.fixture_store.version,
        "scenarios": context.scenario_results,
    }
    context.result_sink.write(report, json_path=target.report_json_path, console=target.report_console)
