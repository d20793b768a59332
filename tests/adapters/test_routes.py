"""Unit tests for coach routes."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from socratic_coach.adapters.storage.json_store import JsonStorage
from socratic_coach.adapters.web.server import app
from socratic_coach.domain.coach import SocraticCoach
from socratic_coach.domain.fallbacks import FALLBACK_RESPONSES, FALLBACK_STUCK_OPTIONS
from socratic_coach.domain.session import SessionRegistry
from socratic_coach.ports.outbound import ProviderError


class MockProvider:
    def __init__(self, response="mock response"):
        self.response = response

    async def generate_text(self, prompt):
        return self.response


class FailingProvider:
    async def generate_text(self, prompt):
        raise ProviderError("down")


@pytest.fixture
def transport():
    return ASGITransport(app=app)


class TestStatelessRoutes:
    @pytest.mark.asyncio
    async def test_initial_state(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/coach/state/initial")
        assert resp.status_code == 200
        assert resp.json() == {
            "step": 1,
            "validationComplete": False,
            "inquiryCount": 0,
            "coreBeliefIdentified": None,
            "reframeGiven": False,
        }

    @pytest.mark.asyncio
    async def test_respond_success(self, transport):
        coach = SocraticCoach(MockProvider('Tell me more. <BUTTONS>["A", "B"]</BUTTONS>'))
        with patch("socratic_coach.adapters.web.routes.coach", coach):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post("/coach/respond", json={
                    "message": "I want to quit",
                    "history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
                    "state": {"step": 2, "validationComplete": True, "inquiryCount": 1},
                })
        assert resp.status_code == 200
        data = resp.json()
        assert data["parsedResponse"]["tokens"][1] == {"type": "buttons", "options": ["A", "B"]}
        assert data["newState"]["step"] == 3
        assert data["newState"]["inquiryCount"] == 2

    @pytest.mark.asyncio
    async def test_respond_provider_failure_is_not_an_error(self, transport):
        with patch("socratic_coach.adapters.web.routes.coach", SocraticCoach(FailingProvider())):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post("/coach/respond", json={"message": "hi"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["response"] == FALLBACK_RESPONSES[1]
        assert data["newState"]["step"] == 2

    @pytest.mark.asyncio
    async def test_respond_rejects_bad_step(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/coach/respond", json={"message": "hi", "state": {"step": 5}})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_core_action_fallback(self, transport):
        with patch("socratic_coach.adapters.web.routes.coach", SocraticCoach(FailingProvider())):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post("/coach/core-action", json={"limitingBelief": "I am too old"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Challenge Your Inner Story"
        assert data["limitingBelief"] == "I am too old"
        assert '"I am too old"' in data["description"]

    @pytest.mark.asyncio
    async def test_stuck_options(self, transport):
        mock = AsyncMock()
        mock.generate_stuck_options.return_value = ["a", "b", "c"]
        with patch("socratic_coach.adapters.web.routes.coach", mock):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post("/coach/stuck-options", json={"message": "idk", "context": "work"})
        assert resp.status_code == 200
        assert resp.json() == {"options": ["a", "b", "c"]}
        mock.generate_stuck_options.assert_awaited_once_with("idk", "work")

    @pytest.mark.asyncio
    async def test_stuck_options_fallback(self, transport):
        with patch("socratic_coach.adapters.web.routes.coach", SocraticCoach(FailingProvider())):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post("/coach/stuck-options", json={"message": "idk"})
        assert resp.json() == {"options": FALLBACK_STUCK_OPTIONS}


class TestSessionRoutes:
    @pytest.fixture
    def registry(self, tmp_path):
        registry = SessionRegistry(SocraticCoach(MockProvider("I hear you.")), JsonStorage(str(tmp_path)))
        with patch("socratic_coach.adapters.web.routes.sessions", registry):
            yield registry

    @pytest.mark.asyncio
    async def test_send_and_fetch(self, transport, registry):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/coach/sessions/abc/messages", json={"message": "hello"})
            assert resp.status_code == 200
            data = resp.json()
            assert data["reply"]["content"] == "I hear you."
            assert data["state"]["step"] == 2
            assert data["stepDescription"] == "Understanding deeper"

            resp = await ac.get("/coach/sessions/abc")
        assert [m["role"] for m in resp.json()["messages"]] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, transport, registry):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/coach/sessions/abc/messages", json={"message": "  "})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_conversation_id(self, transport, registry):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/coach/sessions/bad.id")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_clear(self, transport, registry):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.post("/coach/sessions/abc/messages", json={"message": "hello"})
            resp = await ac.delete("/coach/sessions/abc")
        assert resp.status_code == 200
        assert resp.json()["messages"] == []
        assert resp.json()["state"]["step"] == 1


class TestStatus:
    @pytest.mark.asyncio
    async def test_status(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/status")
        assert resp.status_code == 200
        assert resp.json()["aiProvider"] in ("groq", "claude")
