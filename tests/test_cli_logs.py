from healthprobe.cli.common import find_log_file, infer_run_status, resolve_log_dir


def test_run_status_is_read_from_last_marker(tmp_path):
    log = tmp_path / "check-1.log"
    log.write_text(
        "2026-01-01 | [INFO] | 1 | healthprobe | Stage 1/1: Core\n"
        "2026-01-01 | [INFO] | 1 | healthprobe | RUN_STATUS=good\n",
        encoding="utf-8",
    )
    assert infer_run_status(log) == "good"


def test_interrupted_run_is_unknown(tmp_path):
    log = tmp_path / "check-2.log"
    log.write_text("started\n", encoding="utf-8")
    assert infer_run_status(log) == "unknown"


def test_log_dir_resolution(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHPROBE_LOGS_DIR", str(tmp_path))

    assert resolve_log_dir(command="check", suite="health", explicit=None) == (
        tmp_path.resolve() / "check" / "health"
    )
    assert resolve_log_dir(command="check", suite=None, explicit=str(tmp_path)) == tmp_path.resolve()


def test_find_log_file_by_stem(tmp_path):
    (tmp_path / "check-run.log").write_text("x", encoding="utf-8")

    assert find_log_file(tmp_path, "check-run") == tmp_path / "check-run.log"
    assert find_log_file(tmp_path, "check-run.log") == tmp_path / "check-run.log"
    assert find_log_file(tmp_path, "missing") is None
