import logging

import pytest

from scriptarc.telemetry import (
    InMemoryReporter,
    TelemetryContext,
    TelemetryReporter,
    telemetry_enabled,
)

pytestmark = pytest.mark.unit


def test_disabled_by_default_returns_shared_noop():
    assert telemetry_enabled() is False
    a = TelemetryContext()
    b = TelemetryContext()
    assert a is b
    assert a.enabled is False
    with a("anything", k=1) as ctx:
        ctx.count("x")
        ctx.gauge("y", 1.0)


@pytest.mark.parametrize("var", ["SCRIPTARC_TELEMETRY", "DEBUG"])
def test_env_flag_enables_logging_context(monkeypatch, var):
    monkeypatch.setenv(var, "1")
    assert TelemetryContext().enabled is True


def test_explicit_reporter_enables_and_nests_scopes():
    reporter = InMemoryReporter()
    assert isinstance(reporter, TelemetryReporter)
    tele = TelemetryContext(reporter)
    with tele("outer"):
        with tele("inner"):
            tele.count("hits")
            tele.count("hits", 2)
        tele.gauge("level", 0.5)
    assert set(reporter.timings) == {"outer", "outer.inner"}
    assert reporter.total("outer.inner.hits") == 3
    assert reporter.metrics["outer.level"] == [0.5]


def test_failed_scope_still_reports_and_reraises():
    recorded = {}

    class Capture:
        def record_timing(self, scope, duration, **metadata):
            recorded[scope] = metadata

        def record_metric(self, scope, value, **metadata):
            pass

    tele = TelemetryContext(Capture())
    with pytest.raises(RuntimeError), tele("work", label="x"):
        raise RuntimeError("boom")
    assert recorded["work"]["failed"] is True
    assert recorded["work"]["label"] == "x"


def test_reporter_failure_is_logged_not_raised(caplog):
    class Broken:
        def record_timing(self, scope, duration, **metadata):
            raise ValueError("reporter broke")

        def record_metric(self, scope, value, **metadata):
            raise ValueError("reporter broke")

    tele = TelemetryContext(Broken())
    with caplog.at_level(logging.ERROR, logger="scriptarc.telemetry"):
        with tele("scope"):
            tele.count("n")
    assert sum("Telemetry reporter 'Broken' failed" in r.getMessage() for r in caplog.records) == 2


def test_empty_scope_name_rejected():
    tele = TelemetryContext(InMemoryReporter())
    with pytest.raises(ValueError), tele(""):
        pass
