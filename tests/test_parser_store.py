import json

from core.parser_store import InMemoryParserStore, JsonParserStore

KEY = "dataExtractorCustomParsers"
ENTRY = {"name": "A", "matches": ["x"], "metadata": "", "table": ""}


class TestJsonParserStore:

    def test_missing_file_loads_empty(self, tmp_path):
        store = JsonParserStore(tmp_path / "parsers.json", KEY)
        assert store.load() == []

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "parsers.json"
        store = JsonParserStore(path, KEY)
        store.save([ENTRY])
        assert JsonParserStore(path, KEY).load() == [ENTRY]
        assert json.loads(path.read_text(encoding="utf-8")) == {KEY: [ENTRY]}

    def test_save_preserves_other_keys(self, tmp_path):
        path = tmp_path / "parsers.json"
        path.write_text(json.dumps({"other": 1}), encoding="utf-8")
        JsonParserStore(path, KEY).save([ENTRY])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["other"] == 1
        assert data[KEY] == [ENTRY]

    def test_save_leaves_no_temp_files(self, tmp_path):
        store = JsonParserStore(tmp_path / "parsers.json", KEY)
        store.save([ENTRY])
        store.save([])
        assert [p.name for p in tmp_path.iterdir()] == ["parsers.json"]

    def test_value_stored_as_json_string(self, tmp_path):
        path = tmp_path / "parsers.json"
        path.write_text(json.dumps({KEY: json.dumps([ENTRY])}), encoding="utf-8")
        assert JsonParserStore(path, KEY).load() == [ENTRY]

    def test_malformed_file_loads_empty(self, tmp_path, caplog):
        path = tmp_path / "parsers.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonParserStore(path, KEY).load() == []
        assert "inválido" in caplog.text

    def test_non_ascii_text_is_kept(self, tmp_path):
        path = tmp_path / "parsers.json"
        entry = dict(ENTRY, metadata="Amount: ₹ (?<A>\\d+)")
        JsonParserStore(path, KEY).save([entry])
        assert "₹" in path.read_text(encoding="utf-8")


def test_in_memory_store_counts_saves():
    store = InMemoryParserStore([ENTRY])
    store.save([])
    assert store.load() == []
    assert store.save_count == 1
