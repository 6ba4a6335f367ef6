from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional
import pytest

from src.bot.client import ClientOptions
from src.services.cooldowns import CooldownRegistry


class FakeClock:
    """Manually advanced wall clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.deferred = False
        self._done = False

    def is_done(self) -> bool:
        return self._done

    async def send_message(self, content: Optional[str] = None, **kwargs: Any) -> None:
        self._done = True
        self.sent.append({"content": content, **kwargs})

    async def defer(self, **kwargs: Any) -> None:
        self._done = True
        self.deferred = True


class FakeFollowup:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    async def send(self, content: Optional[str] = None, **kwargs: Any) -> None:
        self.sent.append({"content": content, **kwargs})


class FakeUser:
    def __init__(self, user_id: int, name: str = "tester"):
        self.id = user_id
        self.name = name
        self.display_name = name.title()
        self.display_avatar = SimpleNamespace(url=f"https://cdn.example/avatars/{user_id}.png")


class FakeClient:
    """Stand-in for CustomClient exposing the attributes commands read."""

    def __init__(self, clock: FakeClock, *, developer_ids: tuple[int, ...] = (), options: Optional[ClientOptions] = None):
        self.options = options or ClientOptions(command_error_cooldown_seconds=60)
        self.cooldowns = CooldownRegistry(self.options.command_error_cooldown_seconds, clock=clock)
        self.commands: dict[str, Any] = {}
        self.developer_ids = developer_ids
        self.support_server_url = "https://support.example"
        self.bot_invite_url = "https://invite.example"
        self.paste_service_url = "https://paste.example"
        self.user = FakeUser(999, "templatebot")

    def add_command(self, command: Any) -> None:
        self.commands[command.name] = command
        self.cooldowns.Ensure(command.name)


class FakeInteraction:
    def __init__(self, client: FakeClient, user_id: int = 111, name: str = "tester"):
        self.client = client
        self.user = FakeUser(user_id, name)
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.edits: list[dict[str, Any]] = []

    async def edit_original_response(self, **kwargs: Any) -> None:
        self.edits.append(kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fake_client(clock: FakeClock) -> FakeClient:
    """Client with developer id 42 and a 60s error cooldown."""
    return FakeClient(clock, developer_ids=(42,))


@pytest.fixture()
def make_interaction(fake_client: FakeClient):
    def _make(user_id: int = 111, name: str = "tester") -> FakeInteraction:
        return FakeInteraction(fake_client, user_id=user_id, name=name)

    return _make
