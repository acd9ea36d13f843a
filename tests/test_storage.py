from hkust_catalog_export.storage import Storage


def test_layout(tmp_path):
    storage = Storage(tmp_path)
    assert storage.page_path("2330", "ACCT") == tmp_path / "2330" / "ACCT.html"
    assert storage.term_json_path("2330") == tmp_path / "2330.json"
    assert storage.term_slim_json_path("2330") == tmp_path / "2330-slim.json"


def test_save_and_load_page(tmp_path):
    storage = Storage(tmp_path / "data")
    path = storage.save_page("2330", "COMP", "<html>COMP</html>")
    assert path.exists()
    assert storage.load_page("2330", "COMP") == "<html>COMP</html>"


def test_list_stored_subjects(tmp_path):
    storage = Storage(tmp_path)
    assert storage.list_stored_subjects("2330") == []

    storage.save_page("2330", "MATH", "")
    storage.save_page("2330", "ACCT", "")
    (storage.term_dir("2330") / "notes.txt").write_text("ignored", encoding="utf-8")
    assert storage.list_stored_subjects("2330") == ["ACCT", "MATH"]
