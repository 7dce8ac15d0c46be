import dataclasses
import subprocess

import pytest

from fakes import FakeRunner, FakeTransport

from healthprobe.pipeline import RunContext
from healthprobe.probes import (
    Expectation,
    Extract,
    FieldMatch,
    ProbeStatus,
    Upload,
    command_probe,
    execute,
    json_probe,
    page_probe,
    upload_probe,
)
from healthprobe.transport import ConnectionFailed


REGISTER = json_probe(
    "Registration",
    "POST",
    "/api/tourist/register",
    body={"name": "Ada"},
    extract=(Extract("issuedId", field="uniqueId"),),
)

INFO = json_probe("Info", "GET", "/api/tourist/info/{issuedId}", requires={"issuedId"})


def test_unmet_dependency_skips_without_network_call():
    transport = FakeTransport()
    outcome = execute(INFO, RunContext(), transport)

    assert outcome.status is ProbeStatus.SKIPPED
    assert outcome.missing == ("issuedId",)
    assert transport.calls == []


def test_pass_returns_state_delta_without_touching_context():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): (200, {"success": True, "uniqueId": "T-1"})}
    )
    ctx = RunContext()
    outcome = execute(REGISTER, ctx, transport)

    assert outcome.passed
    assert dict(outcome.state_delta) == {"issuedId": "T-1"}
    assert len(ctx) == 0
    assert transport.calls[0][2] == {"name": "Ada"}


def test_path_is_rendered_from_context():
    transport = FakeTransport(
        routes={("GET", "/api/tourist/info/T-9"): (200, {"success": True})}
    )
    outcome = execute(INFO, RunContext({"issuedId": "T-9"}), transport)

    assert outcome.passed
    assert transport.paths() == ["/api/tourist/info/T-9"]


def test_success_flag_false_fails_with_server_message():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): (200, {"success": False, "message": "chain down"})}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert "chain down" in outcome.message


def test_status_outside_range_fails():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): (500, {"message": "boom"})}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert outcome.message.startswith("HTTP 500, expected 200")


def test_unparseable_body_fails_and_keeps_raw_text():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): (200, "<html>proxy error</html>")}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert "not valid JSON" in outcome.message
    assert outcome.raw == "<html>proxy error</html>"


def test_transport_error_becomes_failed_outcome():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): ConnectionFailed("refused")}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert outcome.message == "transport error: refused"


def test_unexpected_exception_becomes_failed_outcome():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): RuntimeError("bug")}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert outcome.message == "unexpected error: RuntimeError: bug"


def test_missing_extract_field_fails():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/register"): (200, {"success": True})}
    )
    outcome = execute(REGISTER, RunContext(), transport)

    assert outcome.failed
    assert "uniqueId" in outcome.message
    assert dict(outcome.state_delta) == {}


def test_bearer_header_only_when_token_present():
    probe = json_probe("Pending", "GET", "/api/authority/pending", bearer="authToken")
    transport = FakeTransport(routes={("GET", "/api/authority/pending"): (200, {"ok": 1})})

    execute(probe, RunContext(), transport)
    execute(probe, RunContext({"authToken": "tok"}), transport)

    assert transport.calls[0][3] == {}
    assert transport.calls[1][3] == {"Authorization": "Bearer tok"}


def test_field_match_compares_against_context():
    probe = json_probe(
        "Info",
        "GET",
        "/info/{issuedId}",
        expect=Expectation(matches=(FieldMatch("data.name", "registeredName"),)),
        requires={"issuedId", "registeredName"},
    )
    ctx = RunContext({"issuedId": "T-1", "registeredName": "Ada"})

    ok = FakeTransport(routes={("GET", "/info/T-1"): (200, {"data": {"name": "Ada"}})})
    bad = FakeTransport(routes={("GET", "/info/T-1"): (200, {"data": {"name": "Bob"}})})

    assert execute(probe, ctx, ok).passed
    mismatch = execute(probe, ctx, bad)
    assert mismatch.failed
    assert "data.name" in mismatch.message


def test_page_probe_records_transport_and_checks_keywords():
    probe = page_probe("Home", "/", "Welcome", "Register")
    transport = FakeTransport(pages={"/": (200, "Welcome, please Register", "http")})

    outcome = execute(probe, RunContext(), transport)
    assert outcome.passed
    assert outcome.transport_used == "http"
    assert outcome.message == "HTTP 200 via http"

    transport.pages["/"] = (200, "Welcome", "https")
    outcome = execute(probe, RunContext(), transport)
    assert outcome.failed
    assert "Register" in outcome.message


def test_page_probe_fails_when_both_schemes_fail():
    outcome = execute(page_probe("Home", "/"), RunContext(), FakeTransport())
    assert outcome.failed
    assert "Both HTTPS and HTTP failed" in outcome.message


UPLOAD = upload_probe(
    "Document Upload",
    "/api/tourist/upload-document",
    Upload(
        fields={"uniqueId": "{issuedId}", "documentType": "passport"},
        file_field="document",
        filename="passport.txt",
        content="Tourist ID: {issuedId}",
    ),
    requires={"issuedId"},
)


def test_upload_renders_form_and_removes_artifact():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/upload-document"): (200, {"success": True})}
    )
    outcome = execute(UPLOAD, RunContext({"issuedId": "T-1"}), transport)

    assert outcome.passed
    sent = transport.uploads[0]
    assert sent["fields"] == {"uniqueId": "T-1", "documentType": "passport"}
    assert sent["field"] == "document"
    assert sent["content"] == b"Tourist ID: T-1"
    assert not sent["artifact"].exists()


def test_upload_artifact_removed_when_transport_fails():
    transport = FakeTransport(
        routes={("POST", "/api/tourist/upload-document"): ConnectionFailed("reset")}
    )
    outcome = execute(UPLOAD, RunContext({"issuedId": "T-1"}), transport)

    assert outcome.failed
    assert not transport.uploads[0]["artifact"].exists()


def test_upload_probe_without_form_fails_instead_of_raising():
    broken = dataclasses.replace(UPLOAD)
    object.__setattr__(broken, "upload", None)

    outcome = execute(broken, RunContext({"issuedId": "T-1"}), FakeTransport())

    assert outcome.failed
    assert "has no upload form" in outcome.message


@pytest.mark.parametrize(
    "probe, ctx, payload, expected",
    [
        (REGISTER, {}, (200, {"success": True, "uniqueId": "T-1"}), ProbeStatus.PASSED),
        (REGISTER, {}, (200, {"success": False, "message": "chain down"}), ProbeStatus.FAILED),
        (REGISTER, {}, (200, "<html>proxy error</html>"), ProbeStatus.FAILED),
        (INFO, {}, (200, {"success": True}), ProbeStatus.SKIPPED),
    ],
    ids=["pass", "validation-fail", "parse-fail", "skip"],
)
def test_same_probe_twice_gives_same_status(probe, ctx, payload, expected):
    transport = FakeTransport(routes={("POST", "/api/tourist/register"): payload})
    context = RunContext(ctx)

    first = execute(probe, context, transport)
    second = execute(probe, context, transport)

    assert first.status is expected
    assert second.status is first.status
    assert len(context) == 0


DOCKER = command_probe("Containers", ["docker-compose", "ps"], "Up", "healthy")


def test_command_probe_passes_on_expected_output():
    runner = FakeRunner(stdout="api   Up (healthy)\n")
    outcome = execute(DOCKER, RunContext(), FakeTransport(), command_runner=runner, command_timeout=5)

    assert outcome.passed
    assert runner.calls[0][0] == ["docker-compose", "ps"]
    assert runner.calls[0][1]["timeout"] == 5


def test_command_probe_failures():
    ctx, transport = RunContext(), FakeTransport()

    missing_word = execute(DOCKER, ctx, transport, command_runner=FakeRunner(stdout="api Up"))
    assert missing_word.failed and "healthy" in missing_word.message

    nonzero = execute(DOCKER, ctx, transport, command_runner=FakeRunner(returncode=1, stderr="no daemon"))
    assert nonzero.failed and nonzero.raw == "no daemon"

    absent = execute(DOCKER, ctx, transport, command_runner=FakeRunner(raises=FileNotFoundError()))
    assert absent.message == "command not found: docker-compose"

    slow = execute(
        DOCKER,
        ctx,
        transport,
        command_runner=FakeRunner(raises=subprocess.TimeoutExpired("docker-compose", 5)),
        command_timeout=5,
    )
    assert slow.failed and "timed out" in slow.message
