"""
tourist.py

Probe definitions for the tourist registry service, shared by every suite.

Run Context keys:
- issuedId        identifier returned by registration
- registeredName  name submitted at registration (literal marker)
- authToken       authority session token
- infoConfirmed   marker set when the stored record matched the submission
"""

from __future__ import annotations

from healthprobe.env import Environment
from healthprobe.probes import (
    ANY_STATUS,
    Expectation,
    Extract,
    FieldMatch,
    ProbeDescriptor,
    Upload,
    command_probe,
    json_probe,
    page_probe,
    upload_probe,
)

ISSUED_ID = "issuedId"
REGISTERED_NAME = "registeredName"
AUTH_TOKEN = "authToken"
INFO_CONFIRMED = "infoConfirmed"

STATUS_OK = Expectation()


def _literal(text: str) -> str:
    """Escape braces so configured values are never read as placeholders."""
    return text.replace("{", "{{").replace("}", "}}")


# (name, path, keyword) for the static frontend pages
PAGES: tuple[tuple[str, str, str], ...] = (
    ("Home Page", "/", "VIKRANTA"),
    ("Portal", "/portal.html", "Tourist Registry Portal"),
    ("Tourist Auth", "/tourist-auth.html", "Tourist Portal"),
    ("Dashboard", "/dashboard-simple.html", "Tourist Dashboard"),
    ("Authority Login", "/authority-login.html", "Authority Login"),
    ("Authority Panel", "/authority-panel.html", "Authority Dashboard"),
)


# ------------------------------------------------------------
# Infrastructure
# ------------------------------------------------------------


def containers(name: str = "Docker Containers") -> ProbeDescriptor:
    return command_probe(name, ["docker-compose", "ps"], "Up", "healthy")


def backend_health(name: str = "Backend API") -> ProbeDescriptor:
    # Any HTTP answer counts: older deployments have no health route.
    return json_probe(name, "GET", "/api/health", expect=ANY_STATUS)


# ------------------------------------------------------------
# Tourist
# ------------------------------------------------------------


def registration(name: str, tourist: dict[str, str]) -> ProbeDescriptor:
    return json_probe(
        name,
        "POST",
        "/api/tourist/register",
        body=tourist,
        extract=(
            Extract(ISSUED_ID, field="uniqueId"),
            Extract(REGISTERED_NAME, value=tourist["name"]),
        ),
    )


def info_retrieval(name: str, *, match_name: bool = False) -> ProbeDescriptor:
    if not match_name:
        return json_probe(name, "GET", "/api/tourist/info/{issuedId}", requires={ISSUED_ID})

    return json_probe(
        name,
        "GET",
        "/api/tourist/info/{issuedId}",
        expect=Expectation(
            success_flag=True,
            matches=(FieldMatch("data.name", REGISTERED_NAME),),
        ),
        requires={ISSUED_ID, REGISTERED_NAME},
        extract=(Extract(INFO_CONFIRMED, value=True),),
    )


def document_upload(name: str, *, filename: str, content: str) -> ProbeDescriptor:
    return upload_probe(
        name,
        "/api/tourist/upload-document",
        Upload(
            fields={"uniqueId": "{issuedId}", "documentType": "passport"},
            file_field="document",
            filename=filename,
            content=content,
        ),
        requires={ISSUED_ID},
    )


def document_retrieval(name: str, *, require_success: bool = False) -> ProbeDescriptor:
    # An empty document list still counts as a working endpoint.
    return json_probe(
        name,
        "GET",
        "/api/tourist/documents/{issuedId}",
        expect=Expectation(success_flag=True) if require_success else STATUS_OK,
        requires={ISSUED_ID},
    )


# ------------------------------------------------------------
# Authority
# ------------------------------------------------------------


def authority_login(name: str, env: Environment) -> ProbeDescriptor:
    return json_probe(
        name,
        "POST",
        "/api/authority/login",
        body={
            "walletAddress": _literal(env.authority_wallet),
            "passphrase": _literal(env.authority_passphrase),
        },
        extract=(Extract(AUTH_TOKEN, field="token"),),
    )


def pending_list(name: str = "Pending Tourists List") -> ProbeDescriptor:
    # Sends the token when login worked but runs either way.
    return json_probe(
        name, "GET", "/api/authority/pending", expect=STATUS_OK, bearer=AUTH_TOKEN
    )


def verification(name: str, *, notes: str, settle_seconds: float = 0.0) -> ProbeDescriptor:
    return json_probe(
        name,
        "POST",
        "/api/authority/verify",
        body={"uniqueId": "{issuedId}", "validityDays": 365, "notes": notes},
        bearer=AUTH_TOKEN,
        requires={ISSUED_ID, AUTH_TOKEN},
        settle_seconds=settle_seconds,
    )


def direct_verification(name: str, *, notes: str) -> ProbeDescriptor:
    return json_probe(
        name,
        "POST",
        "/api/authority/verify-direct",
        body={"uniqueId": "{issuedId}", "validityDays": 365, "notes": notes},
        requires={ISSUED_ID},
    )


def tourist_lookup(name: str = "Tourist Lookup") -> ProbeDescriptor:
    return json_probe(
        name,
        "GET",
        "/api/tourist/info/{issuedId}",
        expect=Expectation(success_flag=True, fields=("data.name", "data.isVerified")),
        requires={ISSUED_ID},
    )


# ------------------------------------------------------------
# Credentials
# ------------------------------------------------------------


def qr_code(name: str = "QR Code Generation") -> ProbeDescriptor:
    return json_probe(name, "GET", "/api/tourist/qrcode/{issuedId}", requires={ISSUED_ID})


def pvc_card(name: str = "PVC Card Generation") -> ProbeDescriptor:
    # The card is a PDF, so only the status is checked.
    return json_probe(
        name, "GET", "/api/tourist/pvc-card/{issuedId}", expect=STATUS_OK, requires={ISSUED_ID}
    )


# ------------------------------------------------------------
# Frontend
# ------------------------------------------------------------


def frontend_pages() -> list[ProbeDescriptor]:
    return [page_probe(name, path, keyword) for name, path, keyword in PAGES]
