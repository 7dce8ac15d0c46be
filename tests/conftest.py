import logging

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_logging(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached environment views.
    """

    keys = [
        "HEALTHPROBE_API_URL",
        "HEALTHPROBE_PAGE_HOST",
        "HEALTHPROBE_SECURE_PORT",
        "HEALTHPROBE_INSECURE_PORT",
        "HEALTHPROBE_VERIFY_TLS",
        "HEALTHPROBE_TIMEOUT",
        "HEALTHPROBE_COMMAND_TIMEOUT",
        "HEALTHPROBE_SETTLE_SECONDS",
        "HEALTHPROBE_AUTHORITY_WALLET",
        "HEALTHPROBE_AUTHORITY_PASSPHRASE",
        "HEALTHPROBE_COMMAND",
        "HEALTHPROBE_SUITE",
        "HEALTHPROBE_RUN_ID",
        "HEALTHPROBE_VERBOSE",
        "HEALTHPROBE_QUIET",
        "LOG_LEVEL",
        "LOG_RETENTION",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Never write into the project tree from tests
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path / "logs"))

    from healthprobe.env import reset_env_caches
    import healthprobe.logger.state as state

    reset_env_caches()

    state.INITIALIZED = False
    state.RUN_ID = None
    state.LOG_DIR = None
    state.LOG_FILE_PATH = None

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    yield

    # Release log files so tmp_path cleanup works everywhere
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    reset_env_caches()
