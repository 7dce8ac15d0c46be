"""Comprehensive health check: every component and integration."""

from __future__ import annotations

from healthprobe.env import Environment
from healthprobe.probes import page_probe
from healthprobe.stages import Stage, stage
from healthprobe.suites import tourist
from healthprobe.suites.base import Link, Suite


def build(env: Environment) -> list[Stage]:
    return [
        stage(
            "Infrastructure",
            [
                tourist.containers(),
                tourist.backend_health(),
                tourist.registration(
                    "Blockchain Connection",
                    {"name": "Health Check Tourist", "nationality": "Test"},
                ),
                page_probe("Frontend Web Server", "/tourist-auth.html", "Tourist Portal"),
            ],
        ),
        stage(
            "Core Features",
            [
                tourist.registration(
                    "Tourist Registration",
                    {
                        "name": "Feature Test Tourist",
                        "nationality": "Test Country",
                        "email": "test@example.com",
                        "phone": "+1234567890",
                    },
                ),
                tourist.info_retrieval("Tourist Info Retrieval"),
                tourist.document_upload(
                    "Document Upload",
                    filename="test-document.txt",
                    content="Test document content for health check",
                ),
                tourist.document_retrieval("Document Retrieval"),
            ],
        ),
        stage(
            "Authority Features",
            [
                tourist.authority_login("Authority Login", env),
                tourist.pending_list(),
                tourist.verification(
                    "Tourist Verification", notes="Health check verification"
                ),
            ],
        ),
        stage(
            "Advanced Features",
            [
                tourist.qr_code(),
                tourist.pvc_card(),
            ],
        ),
        stage("Frontend Pages", tourist.frontend_pages()),
    ]


SUITE = Suite(
    name="health",
    title="Comprehensive Project Health Check",
    build=build,
    links=(
        Link("Registration", "/tourist-auth.html"),
        Link("Dashboard", "/dashboard-simple.html?uniqueId={issuedId}"),
        Link("Authority", "/authority-login.html"),
        Link("Home", "/"),
    ),
)
