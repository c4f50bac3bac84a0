"""NiceGUI chat interface with incremental rendering of relay streams."""

import json
import logging

from nicegui import ui

from deepchat.ui.stream import stream_completion
from deepchat.ui.transcript import ChatEntry, Transcript

logger = logging.getLogger(__name__)

TITLE = "DeepSeek Chat"
ERROR_BANNER_TIMEOUT_MS = 5000
# navigator.share settles only after the user picks a target or dismisses the sheet.
SHARE_TIMEOUT_S = 120.0

CUSTOM_CSS = """
<style>
    body { background: #f9fafb; min-height: 100vh; }

    .header { background: white; border-bottom: 1px solid #e5e7eb; }

    .message-user { background: #eff6ff; border-radius: 8px; }
    .message-assistant {
        background: white;
        border-radius: 8px;
        box-shadow: 0 1px 2px rgba(0, 0, 0, 0.05);
    }

    .avatar-user { background: #3b82f6; }
    .avatar-assistant { background: #374151; }

    .message-assistant pre { background: #f3f4f6; border-radius: 4px; padding: 0.5rem; overflow-x: auto; }
    .message-assistant code { background: #f3f4f6; border-radius: 4px; padding: 0 0.25rem; }
</style>
"""


def copy_message(content: str) -> None:
    """Copy a message to the clipboard; failures are only logged."""
    try:
        ui.clipboard.write(content)
    except Exception as e:
        logger.warning(f"Copy failed: {e!r}")


async def share_message(content: str) -> None:
    """Open the platform share sheet; failures are only logged."""
    payload = json.dumps({"title": f"{TITLE} 分享", "text": content}, ensure_ascii=False)
    try:
        result = await ui.run_javascript(
            f"return navigator.share({payload}).then(() => true).catch(e => String(e));",
            timeout=SHARE_TIMEOUT_S,
        )
    except Exception as e:
        logger.warning(f"Share failed: {e!r}")
        return
    if result is not True:
        logger.warning(f"Share failed: {result}")


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    transcript = Transcript()

    messages_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.input
    send_btn: ui.button
    pending_markdown: ui.markdown | None = None

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-8 h-8 rounded-full flex items-center justify-center {css}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_actions(msg: ChatEntry) -> None:
        with ui.row().classes("gap-2 text-sm text-gray-500"):
            ui.button(
                "复制", icon="content_copy", on_click=lambda: copy_message(msg.content)
            ).props("flat dense no-caps size=sm color=grey-7")
            ui.button(
                "分享", icon="share", on_click=lambda: share_message(msg.content)
            ).props("flat dense no-caps size=sm color=grey-7")

    def render_thinking() -> None:
        with ui.row().classes("w-full items-center gap-4"):
            render_avatar(False)
            with ui.row().classes("message-assistant p-4 items-center gap-2 text-gray-500"):
                ui.spinner(size="sm")
                ui.label("AI 正在思考中...")

    def render_message(msg: ChatEntry) -> None:
        nonlocal pending_markdown
        is_user = msg.role == "user"
        bubble = "message-user" if is_user else "message-assistant"
        is_pending = msg is transcript.pending

        if is_pending and not msg.content:
            render_thinking()
            return

        with ui.row().classes("w-full items-start gap-4 no-wrap"):
            render_avatar(is_user)
            with ui.column().classes("flex-1 gap-1"):
                with ui.element("div").classes(f"w-full p-4 {bubble}"):
                    markdown = ui.markdown(msg.content).classes("text-sm leading-relaxed")
                if is_pending:
                    pending_markdown = markdown
                elif msg.role == "assistant":
                    render_actions(msg)

    def scroll_to_bottom() -> None:
        scroll_area.scroll_to(percent=1.0)

    def refresh_messages() -> None:
        nonlocal pending_markdown
        pending_markdown = None
        messages_container.clear()
        with messages_container:
            if not transcript.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("开始新的对话").classes("text-lg text-gray-400")
            else:
                for msg in transcript.messages:
                    render_message(msg)
        scroll_to_bottom()

    def set_busy(busy: bool) -> None:
        if busy:
            input_field.disable()
            send_btn.disable()
        else:
            input_field.enable()
            send_btn.enable()

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or transcript.is_streaming:
            return

        input_field.value = ""
        transcript.append("user", text)
        payload = transcript.to_payload()
        transcript.start_assistant()
        set_busy(True)
        refresh_messages()

        def on_chunk(content: str) -> None:
            first = pending_markdown is None
            transcript.append_chunk(content)
            if first:
                refresh_messages()
            else:
                pending_markdown.set_content(transcript.pending.content)
                scroll_to_bottom()

        def on_complete() -> None:
            if transcript.pending is not None and not transcript.pending.content:
                transcript.discard_pending()
            else:
                transcript.finish()
            set_busy(False)
            refresh_messages()

        def on_error(error: str) -> None:
            transcript.discard_pending()
            set_busy(False)
            refresh_messages()
            ui.notify(error, type="negative", position="top-right", timeout=ERROR_BANNER_TIMEOUT_MS)

        await stream_completion(payload, on_chunk, on_complete, on_error)

    def new_chat() -> None:
        if transcript.is_streaming:
            return
        transcript.clear()
        refresh_messages()

    # === UI Layout ===
    with ui.column().classes("w-full max-w-4xl mx-auto gap-0").style("height: 100vh"):
        # Header
        with ui.row().classes("w-full header px-4 py-3 items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(TITLE).classes("text-2xl font-bold text-gray-800")
                ui.label("像 Perplexity 一样，获取准确的答案和相关引用").classes(
                    "text-sm text-gray-600"
                )
            ui.button(icon="add", on_click=new_chat).props("flat round color=grey-8")

        # Messages
        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            messages_container = ui.column().classes("w-full gap-6 p-4")
            refresh_messages()

        # Input
        with ui.column().classes("w-full px-4 pb-4 gap-1"):
            with ui.row().classes("w-full items-center gap-2 no-wrap"):
                input_field = (
                    ui.input(placeholder="问我任何问题...")
                    .props("outlined dense")
                    .classes("flex-grow")
                    .on("keydown.enter", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=primary"
                )
            ui.label("Powered by DeepSeek AI").classes("w-full text-xs text-center text-gray-500")


def main(port: int = 8080) -> None:
    ui.run(title=TITLE, port=port, reload=False)


if __name__ == "__main__":
    main()
