"""Check and verify a tourist that is already registered."""

from __future__ import annotations

from healthprobe.env import Environment
from healthprobe.stages import Stage, stage
from healthprobe.suites import tourist
from healthprobe.suites.base import Link, Suite


def build(env: Environment) -> list[Stage]:
    return [
        stage(
            "Manual Verification",
            [
                tourist.tourist_lookup(),
                tourist.direct_verification(
                    "Direct Verification", notes="Manual verification for testing"
                ),
            ],
        ),
    ]


SUITE = Suite(
    name="verify",
    title="Manual Tourist Verification",
    build=build,
    links=(
        Link("QR Code", "/dashboard-simple.html?uniqueId={issuedId}"),
        Link("Authority", "/authority-login.html"),
    ),
    seed_keys=(tourist.ISSUED_ID,),
)
