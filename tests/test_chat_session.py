"""Tests for chat sessions and their stores."""
import pytest
from fakes import FakeLLM
from hypothesis import given
from hypothesis import strategies as st

from taskpilot.chat import ChatSession, create_chat_store, derive_title
from taskpilot.chat.in_memory import InMemoryChatStore
from taskpilot.chat.sqlite import SQLiteChatStore
from taskpilot.errors import ApiError


async def _open_memory_session():
    store = InMemoryChatStore()
    await store.connect()
    return store, await ChatSession.open(store)


class TestTitles:
    """Tests for title derivation."""

    def test_short_message_is_used_verbatim(self):
        """Test that a message within the limit becomes the title."""
        assert derive_title("Hello") == "Hello"
        assert derive_title("x" * 50) == "x" * 50

    def test_long_message_is_truncated(self):
        """Test that long messages are cut to 50 characters plus an ellipsis."""
        assert derive_title("y" * 51) == "y" * 50 + "..."

    @given(st.text())
    def test_title_is_a_prefix(self, content: str):
        """Property test: titles are a bounded prefix of the message."""
        title = derive_title(content)
        assert title.startswith(content[:50])
        assert len(title) <= 53

    @pytest.mark.asyncio
    async def test_title_frozen_after_first_user_message(self):
        """Test that later messages never change the title."""
        _, session = await _open_memory_session()
        assert session.current.title == "New Chat"

        await session.add_message("assistant", "Welcome!")
        assert session.current.title == "New Chat"

        await session.add_message("user", "First question " + "z" * 60)
        await session.add_message("user", "Second question")

        assert session.current.title == ("First question " + "z" * 60)[:50] + "..."


class TestSessionRotation:
    """Tests for archiving and history."""

    @pytest.mark.asyncio
    async def test_add_message_is_persisted(self):
        """Test that a message is in the store once add_message returns."""
        store, session = await _open_memory_session()
        await session.add_message("user", "hi")

        state = await store.load_state()
        assert [m.content for m in state.current.messages] == ["hi"]

    @pytest.mark.asyncio
    async def test_failed_save_leaves_conversation_unchanged(self):
        """Test that memory and store agree when persisting a message fails."""
        class FullDiskStore(InMemoryChatStore):
            async def save_current(self, conversation):
                raise OSError("disk full")

        store = FullDiskStore()
        session = await ChatSession.open(store)

        with pytest.raises(OSError, match="disk full"):
            await session.add_message("user", "lost")

        assert session.get_messages() == []
        assert session.current.title == "New Chat"
        assert (await store.load_state()).current.messages == []

    @pytest.mark.asyncio
    async def test_empty_conversation_is_not_archived(self):
        """Test that starting over from an empty chat keeps history unchanged."""
        _, session = await _open_memory_session()
        before = session.current.id

        await session.start_new_conversation()

        assert session.get_conversation_history() == []
        assert session.current.id != before

    @pytest.mark.asyncio
    async def test_conversation_with_messages_is_archived_first(self):
        """Test that the previous conversation goes to the front of history."""
        _, session = await _open_memory_session()
        await session.add_message("user", "one")
        first_id = session.current.id
        await session.start_new_conversation()
        await session.add_message("user", "two")
        second_id = session.current.id
        await session.start_new_conversation()

        history = session.get_conversation_history()
        assert [c.id for c in history] == [second_id, first_id]
        assert session.get_messages() == []

    @pytest.mark.asyncio
    async def test_history_is_capped(self):
        """Test that the 51st archived conversation drops the oldest."""
        _, session = await _open_memory_session()
        ids = []
        for i in range(51):
            await session.add_message("user", f"message {i}")
            ids.append(session.current.id)
            await session.start_new_conversation()

        history = session.get_conversation_history()
        assert len(history) == 50
        assert history[0].id == ids[-1]
        assert ids[0] not in {c.id for c in history}

    @pytest.mark.asyncio
    async def test_load_conversation(self):
        """Test reopening an archived conversation."""
        _, session = await _open_memory_session()
        await session.add_message("user", "old chat")
        old_id = session.current.id
        await session.start_new_conversation()
        await session.add_message("user", "new chat")
        new_id = session.current.id

        assert await session.load_conversation(old_id)

        assert session.current.id == old_id
        assert [c.id for c in session.get_conversation_history()] == [new_id]

    @pytest.mark.asyncio
    async def test_load_unknown_conversation(self):
        """Test that an unknown id changes nothing."""
        _, session = await _open_memory_session()
        await session.add_message("user", "keep me")
        current_id = session.current.id

        assert not await session.load_conversation("does-not-exist")
        assert session.current.id == current_id

    @pytest.mark.asyncio
    async def test_clear_all_history(self):
        """Test that clearing drops history and the current chat."""
        store, session = await _open_memory_session()
        await session.add_message("user", "a")
        await session.start_new_conversation()
        await session.add_message("user", "b")

        await session.clear_all_history()

        assert session.get_conversation_history() == []
        assert session.get_messages() == []
        assert (await store.load_state()).history == []


class TestStreamReply:
    """Tests for streamed replies."""

    @pytest.mark.asyncio
    async def test_user_then_assistant_messages(self):
        """Test that both sides of the exchange are recorded in order."""
        _, session = await _open_memory_session()
        llm = FakeLLM(chunks=["Hel", "lo"])
        chunks = []

        reply = await session.stream_reply(llm, "Hi", on_chunk=chunks.append)

        assert reply == "Hello"
        assert chunks == ["Hel", "lo"]
        assert [(m.role, m.content) for m in session.get_messages()] == [
            ("user", "Hi"),
            ("assistant", "Hello"),
        ]
        [sent] = llm.requests
        assert [(m.role, m.content) for m in sent] == [("user", "Hi")]

    @pytest.mark.asyncio
    async def test_history_is_sent_as_context(self):
        """Test that earlier turns are included in the next request."""
        _, session = await _open_memory_session()
        llm = FakeLLM(chunks=["ok"])

        await session.stream_reply(llm, "first")
        await session.stream_reply(llm, "second")

        assert [m.content for m in llm.requests[1]] == ["first", "ok", "second"]

    @pytest.mark.asyncio
    async def test_failed_request_keeps_user_message(self):
        """Test that no assistant message is recorded when the request fails."""
        class FailingLLM(FakeLLM):
            async def stream(self, messages, max_tokens=4096):
                raise ApiError(500, "Internal Server Error")

        store, session = await _open_memory_session()

        with pytest.raises(ApiError):
            await session.stream_reply(FailingLLM(), "Hi")

        assert [(m.role, m.content) for m in session.get_messages()] == [("user", "Hi")]
        assert len((await store.load_state()).current.messages) == 1


class TestStores:
    """Tests for store backends."""

    def test_factory(self, tmp_path):
        """Test backend selection by name."""
        assert create_chat_store("memory").backend_type == "memory"
        assert create_chat_store("sqlite", path=tmp_path / "c.db").backend_type == "sqlite"
        with pytest.raises(ValueError, match="Unsupported chat backend"):
            create_chat_store("redis")

    @pytest.mark.asyncio
    async def test_sqlite_round_trip(self, tmp_path):
        """Test that a new process sees the same chat state."""
        path = tmp_path / "nested" / "chat.db"

        store = SQLiteChatStore(path)
        await store.connect()
        session = await ChatSession.open(store)
        await session.add_message("user", "archived")
        archived_id = session.current.id
        await session.start_new_conversation()
        await session.add_message("user", "live")
        await session.add_message("assistant", "reply")
        current_id = session.current.id
        await store.disconnect()

        reopened = SQLiteChatStore(path)
        await reopened.connect()
        restored = await ChatSession.open(reopened)
        await reopened.disconnect()

        assert restored.current.id == current_id
        assert restored.current.title == "live"
        assert [m.content for m in restored.get_messages()] == ["live", "reply"]
        assert [c.id for c in restored.get_conversation_history()] == [archived_id]

    @pytest.mark.asyncio
    async def test_sqlite_empty_database(self, tmp_path):
        """Test that a fresh database yields an empty state."""
        store = SQLiteChatStore(tmp_path / "chat.db")
        await store.connect()
        state = await store.load_state()
        await store.disconnect()

        assert state.current.messages == []
        assert state.current.title == "New Chat"
        assert state.history == []

    @pytest.mark.asyncio
    async def test_sqlite_requires_connect(self, tmp_path):
        """Test that using a store before connect fails clearly."""
        with pytest.raises(RuntimeError, match="not connected"):
            await SQLiteChatStore(tmp_path / "chat.db").load_state()
