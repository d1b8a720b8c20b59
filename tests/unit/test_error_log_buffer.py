from __future__ import annotations
import json
import re
from pathlib import Path
from section_loader.logging.error_log import ErrorLogBuffer
from section_loader.models.error_record import ErrorRecord

KEYS = {"timestamp", "row", "error_type", "message", "identity"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        row=10,
        error_type="NO_CANDIDATES",
        message="no options to match 'Gravel' against",
        identity={"Section ID": "10"},
    )
    data = json.loads(rec.to_json_line())
    assert data["row"] == 10
    assert data["error_type"] == "NO_CANDIDATES"
    assert data["identity"] == {"Section ID": "10"}
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_record_run_level_row():
    rec = ErrorRecord.create(-1, "SESSION_ERROR", "login failed")
    data = json.loads(rec.to_json_line())
    assert data["row"] == -1
    assert data["identity"] == {}


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create(2, "VALIDATION_REJECTED", "Section ID already exists"))
    buf.append(ErrorRecord.create(3, "ACTION_FAILED", "click #btnSave failed after 3 attempts"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    assert re.match(r"^errors-\d{8}-\d{6}\.log$", path.name)
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    # flush 後バッファクリア
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create(2, "UI_TIMEOUT", "section form did not open"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create(5, "UI_TIMEOUT", "section form did not open"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_error_log_buffer_records_copy(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create(2, "UNEXPECTED_ERROR", "boom"))
    records = buf.records
    records.clear()
    assert len(buf) == 1
