import orjson

from ghsnap.progress import ProgressRecord, ProgressStore, Status


def _record(repo, status=Status.SUCCESS, error=""):
    return ProgressRecord(
        repo=repo,
        name=repo.split("/")[-1],
        description=None,
        primary_branch="main",
        status=status,
        error=error,
    )


def test_missing_log_means_no_progress(tmp_path):
    store = ProgressStore(tmp_path / "progress.jsonl")
    assert store.load_skip_set() == set()


def test_append_and_skip_set(tmp_path):
    path = tmp_path / "progress.jsonl"
    store = ProgressStore(path)

    store.append(_record("acme/widget"))
    store.append(_record("acme/gadget", Status.ERROR, "boom"))
    store.append(_record("acme/gizmo", Status.ERROR, "boom"))
    store.append(_record("acme/gizmo"))
    store.append(_record("acme/widget"))

    assert store.load_skip_set() == {"acme/widget", "acme/gizmo"}

    lines = path.read_bytes().splitlines()
    assert len(lines) == 5
    first = orjson.loads(lines[0])
    assert first["repo"] == "acme/widget"
    assert first["status"] == "success"
    assert first["error"] == ""
    assert first["description"] is None
    assert first["timestamp"]


def test_append_never_truncates(tmp_path):
    path = tmp_path / "progress.jsonl"
    path.write_bytes(b'{"existing": true}\n')

    ProgressStore(path).append(_record("acme/widget"))

    assert path.read_bytes().startswith(b'{"existing": true}\n')


def test_append_creates_parent_dir(tmp_path):
    path = tmp_path / "logs" / "progress.jsonl"
    ProgressStore(path).append(_record("acme/widget"))
    assert path.exists()


def test_bad_lines_are_skipped(tmp_path):
    path = tmp_path / "progress.jsonl"
    good = _record("acme/widget").to_jsonb()
    path.write_bytes(
        b"not json at all\n"
        + b"[1, 2, 3]\n"
        + b'{"repo": "acme/gadget"}\n'
        + b'{"repo": "acme/gizmo", "name": null, "description": null,'
        + b' "primary_branch": null, "status": "maybe"}\n'
        + good
        + b"\n\n"
    )

    assert ProgressStore(path).load_skip_set() == {"acme/widget"}


def test_record_roundtrip_keeps_status():
    record = _record("acme/widget", Status.ERROR, "404 Not Found")
    parsed = ProgressRecord.from_json(record.to_json())
    assert parsed == record
    assert not parsed.ok


def test_invalid_utf8_line_is_skipped(tmp_path):
    path = tmp_path / "progress.jsonl"
    torn = '{"repo": "acme/gadget", "description": "日'.encode("utf-8")[:-1]
    path.write_bytes(_record("acme/widget").to_jsonb() + b"\n" + torn + b"\n")

    assert ProgressStore(path).load_skip_set() == {"acme/widget"}


def test_append_after_torn_last_line(tmp_path):
    path = tmp_path / "progress.jsonl"
    path.write_bytes(b'{"repo": "acme/a", "na')
    store = ProgressStore(path)

    store.append(_record("acme/widget"))

    assert store.load_skip_set() == {"acme/widget"}
    assert path.read_bytes().startswith(b'{"repo": "acme/a", "na\n')


def test_unreadable_log_means_no_progress(tmp_path):
    path = tmp_path / "progress.jsonl"
    path.mkdir()

    assert ProgressStore(path).load_skip_set() == set()
