from __future__ import annotations

from healthprobe.probes.descriptor import (
    ANY_STATUS,
    SUCCESS,
    Expectation,
    Extract,
    FieldMatch,
    ProbeDescriptor,
    ProbeKind,
    Target,
    Upload,
    command_probe,
    json_probe,
    page_probe,
    upload_probe,
)
from healthprobe.probes.executor import execute
from healthprobe.probes.outcome import ProbeOutcome, ProbeStatus

__all__ = [
    "ANY_STATUS",
    "SUCCESS",
    "Expectation",
    "Extract",
    "FieldMatch",
    "ProbeDescriptor",
    "ProbeKind",
    "Target",
    "Upload",
    "command_probe",
    "json_probe",
    "page_probe",
    "upload_probe",
    "execute",
    "ProbeOutcome",
    "ProbeStatus",
]
