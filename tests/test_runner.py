import pytest
from fakes import FakeTransport

import healthprobe.runner as runner
from healthprobe.pipeline import RunContext
from healthprobe.probes import ProbeOutcome, json_probe
from healthprobe.runner import Tier, build_report, run_all, tier_for_ratio
from healthprobe.stages import StageReport, stage


@pytest.mark.parametrize(
    "ratio, tier",
    [
        (1.0, Tier.EXCELLENT),
        (0.8, Tier.EXCELLENT),
        (0.79999, Tier.GOOD),
        (0.6, Tier.GOOD),
        (0.59999, Tier.NEEDS_ATTENTION),
        (0.0, Tier.NEEDS_ATTENTION),
    ],
)
def test_tier_boundaries_are_inclusive(ratio, tier):
    assert tier_for_ratio(ratio) is tier


def _report(name, *statuses):
    outcomes = {}
    for i, s in enumerate(statuses):
        if s == "p":
            outcomes[f"{name}-{i}"] = ProbeOutcome.ok()
        elif s == "f":
            outcomes[f"{name}-{i}"] = ProbeOutcome.fail("x")
        else:
            outcomes[f"{name}-{i}"] = ProbeOutcome.skip(("issuedId",))
    return StageReport.build(name, outcomes)


def test_skipped_probes_count_toward_total():
    report = build_report([_report("A", "p", "p", "p"), _report("B", "p", "s")], RunContext())

    assert report.total == 5
    assert report.passed == 4
    assert report.skipped == 1
    assert report.tier is Tier.EXCELLENT  # 4/5 sits exactly on the boundary


def test_three_of_five_is_good():
    report = build_report([_report("A", "p", "p", "p", "f", "s")], RunContext())
    assert report.ratio == pytest.approx(0.6)
    assert report.tier is Tier.GOOD
    assert report.percent == 60


def test_empty_run_needs_attention():
    report = build_report([], RunContext())
    assert report.total == 0
    assert report.ratio == 0.0
    assert report.tier is Tier.NEEDS_ATTENTION


def _ok_probe(name, path):
    return json_probe(name, "GET", path)


def test_run_all_keeps_stage_and_probe_order():
    transport = FakeTransport(
        routes={
            ("GET", "/a"): (200, {"success": True}),
            ("GET", "/b"): (200, {"success": True}),
            ("GET", "/c"): (500, {}),
        }
    )
    stages = [
        stage("First", [_ok_probe("B", "/b"), _ok_probe("A", "/a")]),
        stage("Second", [_ok_probe("C", "/c")]),
    ]

    first = run_all(stages, transport)
    second = run_all(stages, transport)

    for report in (first, second):
        assert [s.name for s in report.stages] == ["First", "Second"]
        assert list(report.stages[0].outcomes) == ["B", "A"]
    assert (first.total, first.passed) == (3, 2)
    assert first.aborted is None


def test_each_run_gets_a_fresh_context():
    from healthprobe.probes import Extract

    register = json_probe(
        "Register", "POST", "/r", extract=(Extract("issuedId", field="uniqueId"),)
    )
    transport = FakeTransport(routes={("POST", "/r"): (200, {"success": True, "uniqueId": "T-1"})})

    first = run_all([stage("S", [register])], transport)
    second = run_all([stage("S", [])], transport)

    assert first.context["issuedId"] == "T-1"
    assert "issuedId" not in second.context


def test_seed_is_visible_to_probes():
    probe = json_probe("Info", "GET", "/info/{issuedId}", requires={"issuedId"})
    transport = FakeTransport(routes={("GET", "/info/T-5"): (200, {"success": True})})

    report = run_all([stage("S", [probe])], transport, seed={"issuedId": "T-5"})
    assert report.passed == 1


def test_stage_fault_yields_partial_report(monkeypatch):
    real_run_stage = runner.run_stage

    def flaky(st, *args, **kwargs):
        if st.name == "Broken":
            raise KeyError("formatter")
        return real_run_stage(st, *args, **kwargs)

    monkeypatch.setattr(runner, "run_stage", flaky)
    transport = FakeTransport(routes={("GET", "/a"): (200, {"success": True})})

    report = run_all(
        [
            stage("Good", [_ok_probe("A", "/a")]),
            stage("Broken", [_ok_probe("B", "/b")]),
            stage("Never", [_ok_probe("C", "/a")]),
        ],
        transport,
    )

    assert [s.name for s in report.stages] == ["Good"]
    assert report.aborted.stage == "Broken"
    assert "KeyError" in report.aborted.error
    assert transport.paths() == ["/a"]
