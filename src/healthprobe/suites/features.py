"""Complete system test: the whole tourist journey end to end."""

from __future__ import annotations

from healthprobe.env import Environment
from healthprobe.probes import page_probe
from healthprobe.stages import Stage, stage
from healthprobe.suites import tourist
from healthprobe.suites.base import Link, Suite

TOURIST = {
    "name": "Complete Test Tourist",
    "nationality": "Test Country",
    "email": "complete@test.com",
    "phone": "+1234567890",
    "passportNumber": "TEST123456",
    "dateOfBirth": "1990-01-01",
    "address": "Test Address, Test City",
}

PASSPORT_DOCUMENT = """PASSPORT DOCUMENT

Tourist ID: {issuedId}
Name: Complete Test Tourist
Country: Test Country
Passport Number: TEST123456

This is a test document for system verification."""


def build(env: Environment) -> list[Stage]:
    return [
        stage(
            "Tourist Journey",
            [
                tourist.registration("Registration", TOURIST),
                tourist.info_retrieval("Login/Info Retrieval", match_name=True),
                tourist.document_upload(
                    "Document Upload",
                    filename="test-passport.txt",
                    content=PASSPORT_DOCUMENT,
                ),
                tourist.document_retrieval("Document Retrieval", require_success=True),
            ],
        ),
        stage(
            "Authority",
            [
                tourist.authority_login("Authority Login", env),
                tourist.verification(
                    "Tourist Verification",
                    notes="Automated test verification",
                    settle_seconds=env.settle_seconds,
                ),
            ],
        ),
        stage(
            "Credentials",
            [
                tourist.qr_code(),
                tourist.pvc_card(),
            ],
        ),
        stage(
            "Frontend",
            [
                page_probe(
                    "Frontend Access",
                    "/dashboard-simple.html",
                    "Tourist Dashboard",
                    "Document Upload",
                ),
            ],
        ),
    ]


SUITE = Suite(
    name="features",
    title="Complete System Test - All Features",
    build=build,
    links=(
        Link("Registration", "/tourist-auth.html"),
        Link("Dashboard", "/dashboard-simple.html?uniqueId={issuedId}"),
        Link("Authority", "/authority-panel.html"),
    ),
)
