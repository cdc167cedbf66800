"""Tests for session transcripts and the chat flow."""

import json

import pytest

from newsrag.cache import CacheStore, session_key
from newsrag.errors import RetrievalFailed, UpstreamError
from newsrag.memory import ChatMessage, MessageRole, SessionStore
from newsrag.rag import RagPipeline


class TestHistory:
    """Loading, saving and clearing transcripts."""

    @pytest.mark.asyncio
    async def test_unknown_session_is_empty(self, sessions):
        assert await sessions.get_history("nobody") == []

    @pytest.mark.asyncio
    async def test_save_and_load_preserves_order(self, sessions, redis_double):
        messages = [
            ChatMessage(role=MessageRole.USER, content="one"),
            ChatMessage(role=MessageRole.ASSISTANT, content="two"),
            ChatMessage(role=MessageRole.USER, content="one"),
        ]

        await sessions.save_history("s1", messages)
        loaded = await sessions.get_history("s1")

        assert [(m.role, m.content) for m in loaded] == [("user", "one"), ("assistant", "two"), ("user", "one")]
        assert redis_double.ttls[session_key("s1")] == 3600

    @pytest.mark.asyncio
    async def test_corrupt_transcript_is_empty(self, sessions, redis_double):
        redis_double.data[session_key("s1")] = "not-json"
        assert await sessions.get_history("s1") == []

        redis_double.data[session_key("s1")] = json.dumps([{"role": "robot", "content": "?"}])
        assert await sessions.get_history("s1") == []

    @pytest.mark.asyncio
    async def test_clear_then_history_is_empty(self, sessions):
        await sessions.process_chat("s1", "What happened to stocks?")

        result = await sessions.clear_history("s1")

        assert result.session_id == "s1"
        assert result.cleared is True
        assert await sessions.get_history("s1") == []

    @pytest.mark.asyncio
    async def test_clear_unknown_session_succeeds(self, sessions):
        result = await sessions.clear_history("never-existed")
        assert result.cleared is True


class TestProcessChat:
    """Chat turns through the pipeline."""

    @pytest.mark.asyncio
    async def test_two_turns_append_four_messages(self, sessions, generator):
        await sessions.process_chat("s1", "What happened to stocks?")
        result = await sessions.process_chat("s1", "And interest rates?")

        assert [m.role for m in result.history] == ["user", "assistant", "user", "assistant"]
        assert [m.content for m in result.history] == [
            "What happened to stocks?",
            generator.answer,
            "And interest rates?",
            generator.answer,
        ]
        assert len(await sessions.get_history("s1")) == 4

    @pytest.mark.asyncio
    async def test_result_carries_pipeline_output(self, sessions, points):
        result = await sessions.process_chat("s1", "What happened to stocks?")

        assert result.session_id == "s1"
        assert result.cached is False
        assert [s.id for s in result.sources] == [p.id for p in points]

        again = await sessions.process_chat("s2", "what happened to stocks?")
        assert again.cached is True

    @pytest.mark.asyncio
    async def test_prompt_excludes_prior_turns(self, sessions, generator):
        await sessions.process_chat("s1", "first question")
        await sessions.process_chat("s1", "second question")

        query, context = generator.calls[-1]
        assert query == "second question"
        assert "first question" not in context

    @pytest.mark.asyncio
    async def test_ttl_refreshed_on_every_save(self, pipeline, redis_double):
        store = SessionStore(pipeline=pipeline, cache=CacheStore(client=redis_double), ttl_seconds=120)

        await store.process_chat("s1", "q1")
        redis_double.ttls[session_key("s1")] = None
        await store.process_chat("s1", "q2")

        assert redis_double.ttls[session_key("s1")] == 120

    @pytest.mark.asyncio
    async def test_pipeline_failure_saves_nothing(self, fakes, cache, redis_double):
        pipeline = RagPipeline(
            embedder=fakes.Embedder(),
            index=fakes.Index(error=UpstreamError("qdrant down")),
            generator=fakes.Generator(),
            cache=cache,
        )
        store = SessionStore(pipeline=pipeline, cache=cache)

        with pytest.raises(RetrievalFailed):
            await store.process_chat("s1", "q")

        assert session_key("s1") not in redis_double.data

    @pytest.mark.asyncio
    async def test_works_without_cache(self, pipeline):
        store = SessionStore(pipeline=pipeline, cache=CacheStore.disabled())

        result = await store.process_chat("s1", "q")

        assert [m.role for m in result.history] == ["user", "assistant"]
        assert await store.get_history("s1") == []
