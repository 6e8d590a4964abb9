from unittest.mock import Mock

from shortlink_client.token_store import (
    InMemoryTokenStore,
    PersistedTokenStore,
    build_session_terminator,
)


class TestInMemoryTokenStore:
    def test_get_set_remove(self):
        store = InMemoryTokenStore()

        assert store.get("accessToken") is None
        store.set("accessToken", "A1")
        assert store.get("accessToken") == "A1"
        store.remove("accessToken")
        assert store.get("accessToken") is None

    def test_remove_missing_key_is_noop(self):
        store = InMemoryTokenStore()

        store.remove("refreshToken")

        assert store.get("refreshToken") is None

    def test_replace_writes_all_values(self):
        store = InMemoryTokenStore({"accessToken": "A1", "refreshToken": "R1"})

        store.replace({"accessToken": "A2", "refreshToken": "R2"})

        assert store.get("accessToken") == "A2"
        assert store.get("refreshToken") == "R2"


class TestPersistedTokenStore:
    def test_values_survive_a_new_instance(self, tmp_path):
        path = str(tmp_path / "store" / "tokens.json")
        PersistedTokenStore(path).replace({"accessToken": "A1", "refreshToken": "R1"})

        reopened = PersistedTokenStore(path)

        assert reopened.get("accessToken") == "A1"
        assert reopened.get("refreshToken") == "R1"

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = PersistedTokenStore(str(tmp_path / "tokens.json"))

        assert store.get("accessToken") is None

    def test_remove_keeps_other_key(self, tmp_path):
        store = PersistedTokenStore(str(tmp_path / "tokens.json"))
        store.set("accessToken", "A1")
        store.set("refreshToken", "R1")

        store.remove("accessToken")

        assert store.get("accessToken") is None
        assert store.get("refreshToken") == "R1"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "tokens.json"
        path.write_text("{not json", encoding="utf-8")

        store = PersistedTokenStore(str(path))

        assert store.get("refreshToken") is None
        store.set("refreshToken", "R1")
        assert store.get("refreshToken") == "R1"


class TestSessionTerminator:
    def test_clears_tokens_and_notifies(self):
        store = InMemoryTokenStore({"accessToken": "A1", "refreshToken": "R1"})
        on_logged_out = Mock()

        build_session_terminator(store, on_logged_out)()

        assert store.get("accessToken") is None
        assert store.get("refreshToken") is None
        on_logged_out.assert_called_once_with()

    def test_is_idempotent(self):
        store = InMemoryTokenStore({"accessToken": "A1", "refreshToken": "R1"})
        terminate = build_session_terminator(store)

        terminate()
        terminate()

        assert store.get("accessToken") is None
        assert store.get("refreshToken") is None
