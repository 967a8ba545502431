import pytest

from colorbook.store import FileDrawingStore, MemoryDrawingStore, StoreError


def test_file_store_put_get_delete(tmp_path):
    store = FileDrawingStore(tmp_path / "drawings")

    assert store.get("pic_1") is None
    store.put("pic_1", b"first")
    assert store.get("pic_1") == b"first"
    assert store.exists("pic_1")

    store.put("pic_1", b"second")
    assert store.get("pic_1") == b"second"

    assert store.delete("pic_1") is True
    assert store.get("pic_1") is None
    assert store.delete("pic_1") is False


def test_file_store_keeps_identities_apart(tmp_path):
    store = FileDrawingStore(tmp_path)
    store.put("a/b", b"slash")
    store.put("a_b", b"underscore")

    assert store.get("a/b") == b"slash"
    assert store.get("a_b") == b"underscore"
    assert all(path.parent == tmp_path for path in tmp_path.iterdir())


def test_failed_put_keeps_previous_bytes(tmp_path, monkeypatch):
    store = FileDrawingStore(tmp_path)
    store.put("pic_1", b"saved")

    def _fail(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("colorbook.store.os.replace", _fail)
    with pytest.raises(StoreError):
        store.put("pic_1", b"lost")

    monkeypatch.undo()
    assert store.get("pic_1") == b"saved"
    assert not [path for path in tmp_path.iterdir() if path.name.endswith(".tmp")]


def test_unreadable_drawing_raises_store_error(tmp_path, monkeypatch):
    store = FileDrawingStore(tmp_path)
    store.put("pic_1", b"saved")

    def _fail(*_args, **_kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr("colorbook.store.Path.read_bytes", _fail)
    with pytest.raises(StoreError):
        store.get("pic_1")


def test_memory_store():
    store = MemoryDrawingStore()
    store.put("p", bytearray(b"abc"))
    assert store.get("p") == b"abc"
    assert store.exists("p")
    assert store.delete("p") is True
    assert store.delete("p") is False
    assert store.get("p") is None
