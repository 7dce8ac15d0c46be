import logging


def test_logger_creates_file_under_command_and_suite(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("HEALTHPROBE_COMMAND", "check")
    monkeypatch.setenv("HEALTHPROBE_SUITE", "health")
    monkeypatch.setenv("HEALTHPROBE_RUN_ID", "2026-01-01_00-00-00")

    from healthprobe.logger import current_log_file, get_logger, init_logging

    init_logging()
    get_logger("test").info("hello")

    expected = tmp_path.resolve() / "check" / "health" / "check-2026-01-01_00-00-00.log"
    assert current_log_file() == expected
    assert expected.exists()


def test_init_logging_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("HEALTHPROBE_COMMAND", "env")

    from healthprobe.logger import init_logging

    init_logging()
    init_logging()

    files = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
    assert len(files) == 1


def test_quiet_mode_attaches_no_console(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("HEALTHPROBE_QUIET", "1")

    from rich.logging import RichHandler

    from healthprobe.logger import init_logging

    init_logging()
    assert not any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)


def test_file_lines_carry_run_id(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("HEALTHPROBE_QUIET", "1")
    monkeypatch.setenv("HEALTHPROBE_RUN_ID", "run-42")

    from healthprobe.logger import current_log_file, get_logger, init_logging

    init_logging()
    get_logger("healthprobe.test").warning("stage failed")
    for h in logging.getLogger().handlers:
        h.flush()

    text = current_log_file().read_text(encoding="utf-8")
    assert "| [WARNING] | run-42 | healthprobe.test | stage failed" in text


def test_retention_keeps_newest(tmp_path):
    import os

    from healthprobe.logger.retention import enforce_retention

    for i in range(4):
        p = tmp_path / f"check-{i}.log"
        p.write_text("x")
        os.utime(p, (1000 + i, 1000 + i))

    removed = enforce_retention(tmp_path, 2)

    assert sorted(p.name for p in removed) == ["check-0.log", "check-1.log"]
    assert sorted(p.name for p in tmp_path.glob("*.log")) == ["check-2.log", "check-3.log"]
