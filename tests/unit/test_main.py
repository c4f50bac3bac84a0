"""Unit tests for entry-point wiring between the relay and the chat page."""

import pytest

from deepchat.main import publish_relay_url, relay_command, relay_port
from deepchat.ui.stream import relay_base_url


class TestRelayUrlWiring:
    """Tests that the chat page targets the port the relay serves on."""

    def test_port_defaults_to_8000(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PORT", raising=False)

        assert relay_port() == 8000

    def test_custom_port_reaches_chat_page(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """PORT=9000 with no API_BASE_URL sends the page's requests to 9000."""
        monkeypatch.setenv("PORT", "9000")
        # set first so the value written by setdefault is undone after the test
        monkeypatch.setenv("API_BASE_URL", "")
        monkeypatch.delenv("API_BASE_URL")

        url = publish_relay_url(relay_port())

        assert url == "http://localhost:9000"
        assert relay_base_url() == "http://localhost:9000"

    def test_explicit_api_base_url_is_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "http://relay.internal:7000")

        assert publish_relay_url(9000) == "http://relay.internal:7000"
        assert relay_base_url() == "http://relay.internal:7000"

    def test_relay_command_uses_port(self) -> None:
        cmd = relay_command("127.0.0.1", 9000)

        assert cmd[-4:] == ["--host", "127.0.0.1", "--port", "9000"]
        assert "deepchat.api.app:app" in cmd
