"""NiceGUI library page and chat panel with SSE streaming support."""

import json
import os
import re
import uuid
from collections.abc import Callable
from datetime import datetime
from urllib.parse import quote

import httpx
from nicegui import events, ui

from docuchats.models.schemas import document_path

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


def reader_path(name: str) -> str:
    """UI path of the reader page for a stored document."""
    return f"/reader/{quote(name, safe='')}"


_LIST_PATTERNS = (
    (r"^[-*]\s+", "ul", "list-disc"),
    (r"^\d+\.\s+", "ol", "list-decimal"),
)


def _wrap_list_items(text: str, marker: str, tag: str, style: str) -> str:
    """Wrap consecutive lines starting with a list marker in one list element."""
    result = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if re.match(marker, stripped):
            if not in_list:
                result.append(f'<{tag} class="{style} list-inside my-2 space-y-1">')
                in_list = True
            result.append(f"<li>{re.sub(marker, '', stripped)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat and notes display.

    Supports: headings, bold, italic, inline code, code blocks, links, lists.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )
    text = re.sub(
        r"^#{1,6}\s+(.+)$", r'<div class="font-semibold mt-2">\1</div>', text, flags=re.M
    )

    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"__(.+?)__", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)
    text = re.sub(r"\b_([^_\n]+)_\b", r"<em>\1</em>", text)

    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    for marker, tag, style in _LIST_PATTERNS:
        text = _wrap_list_items(text, marker, tag, style)

    return text.replace("\n", "<br>")


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%); }

    .message-user {
        background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #0f766e;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #0f766e; }

    .send-btn { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%) !important; }

    /* Reader */
    .paragraph { border-left: 3px solid transparent; transition: border-color 0.2s; }
    .paragraph-selected { border-left-color: #0f766e; background: #f0fdfa; }
    .sentence { cursor: pointer; border-radius: 4px; padding: 0 1px; }
    .sentence:hover { background: #e0f2fe; }
    .sentence-read { color: #6b7280; }
    .sentence-reading { background: #fde68a; }

    .message-assistant strong, .notes strong { font-weight: 600; }
    .message-assistant em { font-style: italic; }
    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant ul, .message-assistant ol { margin: 0.5rem 0; }
    .message-assistant a { color: #1e3a8a; }
</style>
"""


class ChatSession:
    """Chat state for one conversation in one browser tab.

    Attributes:
        document: Document the conversation is about, if any.
        context: Text of the paragraph currently on screen.
    """

    def __init__(self, document: str | None = None) -> None:
        self.messages: list[dict] = []
        self.session_id: str = str(uuid.uuid4())
        self.document = document
        self.context = ""
        self.is_streaming: bool = False

    def add_message(self, role: str, content: str) -> None:
        self.messages.append({
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
        })

    def reset(self) -> None:
        self.messages.clear()
        self.session_id = str(uuid.uuid4())


async def stream_chat_response(
    session: ChatSession,
    message: str,
    on_chunk: Callable[[str], None],
    on_status: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
) -> None:
    """Consume the SSE stream from /chat/stream for one message."""
    payload = {
        "message": message,
        "session_id": session.session_id,
        "document": session.document,
        "context": session.context,
    }
    async with httpx.AsyncClient(timeout=120.0) as client:
        try:
            async with client.stream(
                "POST",
                f"{API_BASE_URL}/chat/stream",
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = json.loads(line[6:])
                    if data.get("error"):
                        on_error(data["error"])
                        return
                    if data.get("done"):
                        on_complete()
                        return
                    if status := data.get("status"):
                        on_status(status)
                    if content := data.get("content"):
                        on_chunk(content)
        except httpx.HTTPStatusError as e:
            on_error(f"HTTP {e.response.status_code}")
        except httpx.RequestError as e:
            on_error(f"Connection failed: {e}")


def render_chat_panel(session: ChatSession) -> None:
    """Render a chat column bound to a session.

    Messages are sent with the session's document and current paragraph.
    """
    messages_container: ui.column
    response_label: ui.html
    input_field: ui.textarea
    send_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[80%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = msg["content"].replace("\n", "<br>")
                    else:
                        content = markdown_to_html(msg["content"])
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                ui.label(msg["time"]).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-48 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    hint = (
                        "Ask about this paragraph" if session.document else "Start a conversation"
                    )
                    ui.label(hint).classes("text-lg text-gray-400")
            else:
                for msg in session.messages:
                    render_message(msg)

    def render_status_indicator(status_text: str = "Thinking") -> tuple[ui.row, ui.label]:
        """Render status indicator with animated dots and status text."""
        with ui.row().classes("w-full justify-start gap-3 items-end") as row:
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    status_label = ui.label(status_text).classes(
                        "text-sm text-gray-500 italic"
                    )
        return row, status_label

    async def send_message() -> None:
        nonlocal response_label
        text = input_field.value.strip()
        if not text or session.is_streaming:
            return

        input_field.value = ""
        session.is_streaming = True
        send_btn.disable()

        session.add_message("user", text)
        refresh_messages()

        with messages_container:
            status_row, status_label = render_status_indicator()

        accumulated = ""
        msg_time = datetime.now().strftime("%I:%M %p")

        status_messages = {
            "received": "Thinking...",
            "generating": "Generating response...",
        }

        def on_status(status: str) -> None:
            if status in status_messages:
                status_label.set_text(status_messages[status])

        def on_chunk(content: str) -> None:
            nonlocal accumulated, response_label
            if not accumulated:
                status_row.delete()
                with (
                    messages_container,
                    ui.row().classes("w-full justify-start gap-3 items-end no-wrap"),
                ):
                    render_avatar(False)
                    with ui.column().classes("max-w-[80%] gap-1"):
                        with ui.element("div").classes("message-assistant px-4 py-3"):
                            response_label = ui.html("", sanitize=False).classes(
                                "text-sm leading-relaxed"
                            )
                        ui.label(msg_time).classes("text-[10px] text-gray-400")
            accumulated += content
            response_label.set_content(markdown_to_html(accumulated))

        def on_complete() -> None:
            session.add_message("assistant", accumulated or "No response received.")
            session.is_streaming = False
            send_btn.enable()
            refresh_messages()

        def on_error(error: str) -> None:
            session.add_message("assistant", f"Error: {error}")
            session.is_streaming = False
            send_btn.enable()
            refresh_messages()
            ui.notify(error, type="negative")

        await stream_chat_response(
            session, text, on_chunk, on_status, on_complete, on_error
        )

    def new_chat() -> None:
        session.reset()
        refresh_messages()

    with ui.column().classes("w-full h-full gap-0 app-container"):
        with ui.row().classes("w-full header px-5 py-3 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("chat").classes("text-white text-2xl")
                ui.label("Chat").classes("text-base font-semibold text-white")
            with ui.row().classes("items-center gap-3"):
                with ui.element("div").classes(
                    "bg-white/20 rounded-full px-3 py-1 flex items-center gap-2"
                ):
                    ui.icon("tag").classes("text-white/80 text-sm")
                    ui.label().bind_text_from(
                        session, "session_id", lambda s: s[:8].upper()
                    ).classes("text-xs text-white/80 font-mono")
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-4"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        with ui.row().classes("w-full p-3 gap-3 items-end bg-white border-t no-wrap"):
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Type a message...")
                    .props("autogrow borderless dense rows=1")
                    .classes("w-full")
                    .on("keydown.enter.prevent", send_message)
                )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
            )


@ui.page("/")
async def chat_page() -> None:
    """Library page: upload PDFs, open them in the reader, and chat."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    @ui.refreshable
    async def document_list() -> None:
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
            try:
                response = await client.get("/documents")
                response.raise_for_status()
                documents = response.json()
            except httpx.HTTPError as e:
                ui.label(f"Could not load documents: {e}").classes("text-sm text-red-500")
                return

        if not documents:
            ui.label("No documents yet. Upload a PDF to start reading.").classes(
                "text-sm text-gray-400"
            )
            return

        for doc in reversed(documents):
            with ui.row().classes("w-full items-center justify-between no-wrap"):
                ui.link(doc["name"], reader_path(doc["name"])).classes(
                    "text-sm text-teal-700 truncate"
                )
                ui.button(
                    icon="delete", on_click=lambda name=doc["name"]: delete_document(name)
                ).props("flat round dense color=grey")

    async def delete_document(name: str) -> None:
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
            try:
                response = await client.delete(document_path(name))
                response.raise_for_status()
            except httpx.HTTPError as e:
                ui.notify(f"Delete failed: {e}", type="negative")
                return
        ui.notify(f"Deleted {name}")
        document_list.refresh()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client:
            try:
                response = await client.post(
                    "/upload/pdf",
                    files={"file": (e.file.name, content, "application/pdf")},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as err:
                detail = err.response.json().get("detail", err.response.status_code)
                ui.notify(f"Upload failed: {detail}", type="negative")
                return
            except httpx.RequestError as err:
                ui.notify(f"Connection failed: {err}", type="negative")
                return
        ui.notify(f"Uploaded {e.file.name}", type="positive")
        document_list.refresh()

    with ui.row().classes("w-full min-h-screen p-4 md:p-8 gap-6 items-stretch no-wrap"):
        with ui.column().classes("w-80 app-container p-5 gap-4"):
            with ui.row().classes("items-center gap-2"):
                ui.icon("menu_book").classes("text-3xl text-teal-700")
                ui.label("DocuChats").classes("text-xl font-semibold")
            ui.upload(
                label="Upload PDF", on_upload=handle_upload, auto_upload=True
            ).props("accept=.pdf flat bordered").classes("w-full")
            ui.label("Documents").classes("text-sm font-medium text-gray-600")
            with ui.column().classes("w-full gap-1"):
                await document_list()

        with ui.element("div").classes("flex-grow").style("height: calc(100vh - 4rem)"):
            render_chat_panel(session)


def main() -> None:
    from docuchats.ui.reader_page import reader_page  # noqa: F401 - Registers the page

    ui.run(title="DocuChats", port=int(os.getenv("UI_PORT", "8080")), reload=False)


if __name__ == "__main__":
    main()
