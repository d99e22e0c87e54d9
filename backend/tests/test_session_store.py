import uuid

import pytest

from director.core.session_store import SessionStore
from director.schemas.board import AgentType
from director.schemas.chat import Message


class TestSessionStore:
    def test_history_is_append_only_snapshot(self, store):
        first = Message(role="user", content="hi")
        store.append_message(first)
        snapshot = store.get_history()
        store.append_message(Message(role="model", content="hello"))

        assert snapshot == (first,)
        assert [m.content for m in store.get_history()] == ["hi", "hello"]

    def test_get_message_by_index(self, store):
        store.append_message(Message(role="user", content="hi"))

        assert store.get_message(0).content == "hi"
        with pytest.raises(IndexError):
            store.get_message(1)
        with pytest.raises(IndexError):
            store.get_message(-1)

    def test_agent_output_cache(self, store):
        assert store.get_cached_agent_output(AgentType.cfo) is None

        store.set_cached_agent_output(AgentType.cfo, "Cut burn")

        assert store.get_cached_agent_output(AgentType.cfo) == "Cut burn"
        assert store.get_cached_agent_output(AgentType.cmo) is None

    def test_summary_cache(self, store, gateway):
        assert store.get_cached_summary() is None

        store.set_cached_summary(gateway.summary)

        assert store.get_cached_summary() == gateway.summary

    def test_pending_brief_is_taken_once(self, store):
        store.set_pending_deck_brief("Build a seed pitch deck")

        assert store.pending_deck_brief == "Build a seed pitch deck"
        assert store.take_pending_deck_brief() == "Build a seed pitch deck"
        assert store.take_pending_deck_brief() is None

    def test_explicit_id(self, startup_context):
        session_id = uuid.uuid4()

        assert SessionStore(startup_context, session_id).id == session_id

    def test_context_is_kept(self, store, startup_context):
        assert store.get_context() is startup_context
