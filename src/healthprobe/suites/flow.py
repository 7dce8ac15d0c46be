"""Registration to dashboard: the minimal user journey."""

from __future__ import annotations

from healthprobe.env import Environment
from healthprobe.probes import page_probe
from healthprobe.stages import Stage, stage
from healthprobe.suites import tourist
from healthprobe.suites.base import Link, Suite


def build(env: Environment) -> list[Stage]:
    return [
        stage(
            "Registration Flow",
            [
                tourist.registration(
                    "Tourist Registration",
                    {
                        "name": "Test Tourist Flow",
                        "nationality": "Test Country",
                        "email": "test@example.com",
                        "phone": "+1234567890",
                    },
                ),
                tourist.info_retrieval("Tourist Info Retrieval", match_name=True),
            ],
        ),
        stage(
            "Frontend",
            [
                # Only meaningful once the stored record was confirmed.
                page_probe(
                    "Frontend Access",
                    "/tourist-auth.html",
                    "Tourist Portal",
                    "Register",
                    requires={tourist.INFO_CONFIRMED},
                ),
            ],
        ),
    ]


SUITE = Suite(
    name="flow",
    title="Complete Tourist Registration Flow",
    build=build,
    links=(
        Link("Login", "/tourist-auth.html"),
        Link("Dashboard", "/dashboard.html?uniqueId={issuedId}"),
    ),
)
