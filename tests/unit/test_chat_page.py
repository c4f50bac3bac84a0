"""Unit tests for the chat page's message actions."""

from unittest.mock import AsyncMock

import pytest

from deepchat.ui import chat_page
from deepchat.ui.chat_page import SHARE_TIMEOUT_S, share_message


class TestShareMessage:
    """Tests for the share action."""

    async def test_waits_for_share_sheet(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The JavaScript call outlives NiceGUI's one-second default."""
        run_js = AsyncMock(return_value=True)
        monkeypatch.setattr(chat_page.ui, "run_javascript", run_js)

        await share_message("hello")

        run_js.assert_awaited_once()
        assert run_js.call_args.kwargs["timeout"] == SHARE_TIMEOUT_S
        assert SHARE_TIMEOUT_S >= 60
        assert "hello" in run_js.call_args.args[0]

    async def test_failure_is_only_logged(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            chat_page.ui, "run_javascript", AsyncMock(side_effect=TimeoutError())
        )

        await share_message("hello")
