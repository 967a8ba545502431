from colorbook.paths import ensure_directories, get_data_root


def test_ensure_directories(tmp_path):
    dirs = ensure_directories(tmp_path)
    assert (tmp_path / "drawings").exists()
    assert (tmp_path / "exports").exists()
    assert dirs["drawings"] == tmp_path / "drawings"
    assert dirs["exports"] == tmp_path / "exports"


def test_get_data_root_resolves(tmp_path):
    assert get_data_root({"data_root": str(tmp_path / "a" / ".." / "b")}) == (tmp_path / "b").resolve()
