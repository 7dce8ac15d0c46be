"""
executor.py

Runs one probe against the service and resolves it to a ProbeOutcome.

Every path returns a value: unmet dependencies are `skipped` without any
network call, transport errors, validation mismatches, unparseable bodies
and unexpected faults are all `failed` with a diagnostic message.
"""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from healthprobe.logger import get_logger
from healthprobe.pipeline import RunContext
from healthprobe.probes.descriptor import Expectation, ProbeDescriptor, ProbeKind
from healthprobe.probes.outcome import ProbeOutcome
from healthprobe.probes.templating import MISSING, lookup, render, render_value
from healthprobe.transport import FileField, Transport, TransportError

log = get_logger("healthprobe.probe")

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


class _ParseFailure(Exception):
    pass


# ------------------------------------------------------------
# Validation
# ------------------------------------------------------------


def _server_message(body: Any) -> str:
    if isinstance(body, Mapping) and body.get("message"):
        return f" ({body['message']})"
    return ""


def check_response(
    expect: Expectation,
    status_code: int,
    text: str,
    body: Any,
    parsed: bool,
    values: Mapping[str, Any],
) -> Optional[str]:
    """
    Return None when the response satisfies the expectation, else the reason.
    Raises _ParseFailure when a JSON check meets a body that is not JSON.
    """
    if not expect.status_min <= status_code <= expect.status_max:
        if expect.status_min == expect.status_max:
            wanted = str(expect.status_min)
        else:
            wanted = f"{expect.status_min}-{expect.status_max}"
        return f"HTTP {status_code}, expected {wanted}{_server_message(body)}"

    missing_words = [k for k in expect.keywords if k not in text]
    if missing_words:
        return f"body missing keyword(s): {', '.join(missing_words)}"

    if not expect.needs_json:
        return None

    if not parsed:
        raise _ParseFailure("response body is not valid JSON")
    if not isinstance(body, Mapping):
        raise _ParseFailure(f"expected a JSON object, got {type(body).__name__}")

    if expect.success_flag and body.get("success") is not True:
        return f"success flag not set{_server_message(body)}"

    absent = [f for f in expect.fields if lookup(body, f) is MISSING]
    if absent:
        return f"body missing field(s): {', '.join(absent)}"

    for m in expect.matches:
        actual = lookup(body, m.field)
        wanted = values.get(m.context_key)
        if actual != wanted:
            return f"{m.field} is {actual!r}, expected {wanted!r}"

    return None


def extract_state(descriptor: ProbeDescriptor, body: Any) -> tuple[dict[str, Any], list[str]]:
    delta: dict[str, Any] = {}
    absent: list[str] = []
    for rule in descriptor.extract:
        if rule.field is None:
            delta[rule.key] = rule.value
            continue
        value = lookup(body, rule.field)
        if value is MISSING or value is None:
            absent.append(rule.field)
        else:
            delta[rule.key] = value
    return delta, absent


# ------------------------------------------------------------
# Execution
# ------------------------------------------------------------


def _headers(descriptor: ProbeDescriptor, values: Mapping[str, Any]) -> dict[str, str]:
    if descriptor.bearer and values.get(descriptor.bearer):
        return {"Authorization": f"Bearer {values[descriptor.bearer]}"}
    return {}


def _submit_upload(
    descriptor: ProbeDescriptor,
    transport: Transport,
    path: str,
    values: Mapping[str, Any],
):
    form = descriptor.upload
    if form is None:
        raise ValueError(f"Upload probe {descriptor.name!r} has no upload form")

    fields = {k: render(v, values) for k, v in form.fields.items()}
    filename = render(form.filename, values)

    # The temporary document is removed on every exit path.
    with tempfile.TemporaryDirectory(prefix="healthprobe-") as tmp:
        doc = Path(tmp) / filename
        doc.write_text(render(form.content, values), encoding="utf-8")
        log.debug(f"upload artifact: {doc}")

        with doc.open("rb") as fh:
            return transport.submit_multipart(
                path,
                fields,
                FileField(
                    name=form.file_field,
                    filename=filename,
                    content=fh,
                    content_type=form.content_type,
                ),
            )


def _run_command(
    descriptor: ProbeDescriptor,
    runner: CommandRunner,
    timeout: Optional[float],
) -> ProbeOutcome:
    argv = list(descriptor.command)
    try:
        proc = runner(argv, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        return ProbeOutcome.fail(f"command not found: {argv[0]}")
    except subprocess.TimeoutExpired:
        return ProbeOutcome.fail(f"command timed out after {timeout}s")
    except OSError as e:
        return ProbeOutcome.fail(f"command could not start: {e}")

    output = proc.stdout or ""
    if proc.returncode != 0:
        return ProbeOutcome.fail(
            f"exit code {proc.returncode}", raw=(proc.stderr or output) or None
        )

    missing_words = [k for k in descriptor.expect.keywords if k not in output]
    if missing_words:
        return ProbeOutcome.fail(
            f"output missing keyword(s): {', '.join(missing_words)}", raw=output
        )
    return ProbeOutcome.ok("exit code 0")


def _attempt(
    descriptor: ProbeDescriptor,
    values: Mapping[str, Any],
    transport: Transport,
    command_runner: CommandRunner,
    command_timeout: Optional[float],
) -> ProbeOutcome:
    if descriptor.kind is ProbeKind.COMMAND:
        return _run_command(descriptor, command_runner, command_timeout)

    path = render(descriptor.target.path, values)
    transport_used: Optional[str] = None

    if descriptor.kind is ProbeKind.PAGE:
        page = transport.fetch_page(path)
        transport_used = page.transport_used
        status, text, body, parsed = page.status_code, page.text, None, False
    else:
        if descriptor.kind is ProbeKind.UPLOAD:
            resp = _submit_upload(descriptor, transport, path, values)
        else:
            payload = render_value(descriptor.body, values) if descriptor.body else None
            resp = transport.request(
                descriptor.target.method, path, payload, _headers(descriptor, values)
            )
        status, text, body, parsed = resp.status_code, resp.text, resp.body, resp.parsed

    try:
        mismatch = check_response(descriptor.expect, status, text, body, parsed, values)
    except _ParseFailure as e:
        return ProbeOutcome.fail(str(e), raw=text, transport_used=transport_used)

    if mismatch:
        return ProbeOutcome.fail(mismatch, raw=text, transport_used=transport_used)

    delta, absent = extract_state(descriptor, body)
    if absent:
        return ProbeOutcome.fail(
            f"response missing field(s) for later probes: {', '.join(absent)}",
            raw=text,
            transport_used=transport_used,
        )

    message = f"HTTP {status}"
    if transport_used:
        message += f" via {transport_used}"
    return ProbeOutcome.ok(message, state_delta=delta, transport_used=transport_used)


def execute(
    descriptor: ProbeDescriptor,
    context: RunContext,
    transport: Transport,
    *,
    command_runner: CommandRunner = subprocess.run,
    command_timeout: Optional[float] = None,
) -> ProbeOutcome:
    """
    Run one probe. Never raises (except KeyboardInterrupt / SystemExit).

    The context is only read; any state the probe produces is returned in
    `ProbeOutcome.state_delta` for the caller to merge.
    """
    if not context.has_all(descriptor.requires):
        missing = context.missing(descriptor.requires)
        log.debug(f"{descriptor.name}: skipped, missing {', '.join(missing)}")
        return ProbeOutcome.skip(missing)

    log.debug(f"{descriptor.name}: {descriptor.target.method} {descriptor.target.path}")
    try:
        return _attempt(
            descriptor,
            context.snapshot(),
            transport,
            command_runner,
            command_timeout,
        )
    except TransportError as e:
        return ProbeOutcome.fail(f"transport error: {e}")
    except Exception as e:
        log.exception(f"{descriptor.name}: unexpected error")
        return ProbeOutcome.fail(f"unexpected error: {type(e).__name__}: {e}")
