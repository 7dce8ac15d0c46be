import pytest

from healthprobe.env import get_env
from healthprobe.suites import get_suite, list_suites


@pytest.mark.parametrize("suite", list_suites(), ids=lambda s: s.name)
def test_every_dependency_is_produced_earlier_or_seeded(suite):
    available = set(suite.seed_keys)
    for st in suite.stages(get_env()):
        for probe in st.probes:
            unmet = probe.requires - available
            assert not unmet, f"{st.name}/{probe.name} needs {sorted(unmet)}"
            available |= probe.provides


@pytest.mark.parametrize("suite", list_suites(), ids=lambda s: s.name)
def test_stage_names_are_unique(suite):
    names = [st.name for st in suite.stages(get_env())]
    assert len(names) == len(set(names))


def test_known_suites():
    assert [s.name for s in list_suites()] == ["health", "features", "flow", "verify"]
    assert get_suite(" Health ").name == "health"
    assert get_suite("verify").seed_keys == ("issuedId",)


def test_unknown_suite_raises():
    with pytest.raises(ValueError, match="Unknown suite"):
        get_suite("nope")


def test_health_suite_covers_every_frontend_page():
    stages = get_suite("health").stages(get_env())
    pages = {st.name: st for st in stages}["Frontend Pages"]
    assert len(pages.probes) == 6


def test_authority_credentials_come_from_environment(monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_AUTHORITY_WALLET", "0xabc")
    monkeypatch.setenv("HEALTHPROBE_AUTHORITY_PASSPHRASE", "p{w}d")

    from healthprobe.env import reset_env_caches

    reset_env_caches()
    stages = get_suite("features").stages(get_env())
    login = {st.name: st for st in stages}["Authority"].probes[0]

    # Braces in secrets are escaped so they are never read as placeholders.
    assert login.body == {"walletAddress": "0xabc", "passphrase": "p{{w}}d"}
    assert login.template_keys == set()
