"""NiceGUI reader: paged document text with sentence read-aloud and chat.

The page fetches the paginated document from the API, renders the current
page's paragraphs as clickable sentences, and drives a PlaybackController
whose audio goes through a hidden ``ui.audio`` element.
"""

import logging

import httpx
from nicegui import ui

from docuchats.models.schemas import document_path
from docuchats.parsing.segmenter import Page
from docuchats.playback.controller import PlaybackController, PlaybackState, SentenceStatus
from docuchats.speech.client import SpeechClient
from docuchats.ui.audio import NiceGuiAudioPlayer
from docuchats.ui.chat_page import (
    API_BASE_URL,
    CUSTOM_CSS,
    ChatSession,
    markdown_to_html,
    render_chat_panel,
)

logger = logging.getLogger(__name__)

_SENTENCE_CLASSES = {
    SentenceStatus.UNREAD: "sentence",
    SentenceStatus.READ: "sentence sentence-read",
    SentenceStatus.READING: "sentence sentence-reading",
}


async def fetch_document(name: str) -> dict:
    """Fetch a stored document's pages from the API.

    Raises:
        httpx.HTTPError: If the request fails.
    """
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client:
        response = await client.get(document_path(name, "pages"))
        response.raise_for_status()
        return response.json()


async def fetch_notes(text: str) -> str:
    """Ask the API for study notes on document text.

    Raises:
        httpx.HTTPError: If the request fails.
    """
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client:
        response = await client.post("/notes", json={"text": text})
        response.raise_for_status()
        return response.json()["notes"]


@ui.page("/reader/{name}")
async def reader_page(name: str) -> None:
    """Reader view for one stored document."""
    ui.add_head_html(CUSTOM_CSS)

    try:
        document = await fetch_document(name)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            message = f"Document '{name}' was not found."
        else:
            message = f"Could not open '{name}': HTTP {e.response.status_code}"
        with ui.column().classes("w-full items-center p-16 gap-4"):
            ui.icon("error_outline").classes("text-5xl text-gray-400")
            ui.label(message).classes("text-lg text-gray-600")
            ui.link("Back to library", "/")
        return
    except httpx.RequestError as e:
        ui.label(f"Connection failed: {e}").classes("p-8 text-red-500")
        return

    pages = [Page.model_validate(page) for page in document["pages"]]
    session = ChatSession(document=name)
    view = {"page": 0, "paragraph": 0}

    audio = ui.audio("", controls=False).classes("hidden")
    speech = SpeechClient()
    controller = PlaybackController(
        speech.synthesize,
        NiceGuiAudioPlayer(audio),
        on_change=lambda _: paragraph_view.refresh(),
    )
    ui.context.client.on_disconnect(controller.stop)

    def current_page() -> Page | None:
        return pages[view["page"]] if pages else None

    def select_paragraph(index: int) -> None:
        page = current_page()
        view["paragraph"] = index
        session.context = page.paragraphs[index].text if page and page.paragraphs else ""
        paragraph_view.refresh()

    def go_to_page(index: int) -> None:
        if not 0 <= index < len(pages):
            return
        view["page"] = index
        controller.load(pages[index].paragraphs)
        select_paragraph(0)
        page_view.refresh()

    def click_sentence(paragraph_index: int, sentence_index: int) -> None:
        select_paragraph(paragraph_index)
        controller.click_sentence(paragraph_index, sentence_index)

    def toggle_paragraph(paragraph_index: int) -> None:
        select_paragraph(paragraph_index)
        controller.toggle(paragraph_index)

    async def show_notes() -> None:
        notes_dialog.open()
        notes_content.set_content('<span class="text-gray-400">Generating notes...</span>')
        try:
            notes = await fetch_notes(document["text"])
        except httpx.HTTPError as e:
            notes_content.set_content(f'<span class="text-red-500">Failed: {e}</span>')
            return
        notes_content.set_content(markdown_to_html(notes))

    @ui.refreshable
    def paragraph_view() -> None:
        page = current_page()
        if page is None or not page.paragraphs:
            ui.label("This page has no readable text.").classes("text-gray-400 italic")
            return

        for p_index, paragraph in enumerate(page.paragraphs):
            selected = " paragraph-selected" if p_index == view["paragraph"] else ""
            position = controller.speaking_position
            playing_here = position is not None and position[0] == p_index
            with ui.row().classes(f"w-full paragraph{selected} p-3 gap-3 no-wrap items-start"):
                icon = "stop" if playing_here else "play_arrow"
                ui.button(
                    icon=icon, on_click=lambda i=p_index: toggle_paragraph(i)
                ).props("flat round dense color=teal").set_enabled(bool(paragraph.sentences))
                with ui.element("p").classes("text-base leading-relaxed"):
                    for s_index, sentence in enumerate(paragraph.sentences):
                        status = controller.sentence_status(p_index, s_index)
                        ui.label(sentence + " ").classes(
                            f"inline {_SENTENCE_CLASSES[status]}"
                        ).on("click", lambda p=p_index, s=s_index: click_sentence(p, s))

        if controller.state is PlaybackState.LOADING:
            ui.spinner(size="sm").classes("self-center")
        if controller.last_error:
            ui.label(f"Playback stopped: {controller.last_error}").classes(
                "text-sm text-red-500"
            )

    @ui.refreshable
    def page_view() -> None:
        total = len(pages)
        with ui.row().classes("w-full items-center justify-between"):
            ui.button(
                icon="chevron_left", on_click=lambda: go_to_page(view["page"] - 1)
            ).props("flat round").set_enabled(view["page"] > 0)
            ui.label(f"Page {view['page'] + 1} of {max(total, 1)}").classes(
                "text-sm text-gray-500"
            )
            ui.button(
                icon="chevron_right", on_click=lambda: go_to_page(view["page"] + 1)
            ).props("flat round").set_enabled(view["page"] < total - 1)

    with ui.dialog() as notes_dialog, ui.card().classes("w-[40rem] max-w-full"):
        ui.label("AI Notes").classes("text-lg font-semibold")
        notes_content = ui.html("", sanitize=False).classes("notes text-sm leading-relaxed")
        ui.button("Close", on_click=notes_dialog.close).props("flat")

    with ui.row().classes("w-full min-h-screen p-4 md:p-8 gap-6 items-stretch no-wrap"):
        with ui.column().classes("flex-grow app-container p-6 gap-4"):
            with ui.row().classes("w-full items-center justify-between no-wrap"):
                with ui.row().classes("items-center gap-2 no-wrap"):
                    ui.button(icon="arrow_back", on_click=lambda: ui.navigate.to("/")).props(
                        "flat round"
                    )
                    ui.label(name).classes("text-lg font-semibold truncate")
                ui.button("AI Notes", icon="auto_awesome", on_click=show_notes).props(
                    "outline color=teal"
                )
            page_view()
            with ui.scroll_area().classes("w-full flex-grow").style(
                "height: calc(100vh - 14rem)"
            ):
                paragraph_view()

        with ui.element("div").classes("w-96").style("height: calc(100vh - 4rem)"):
            render_chat_panel(session)

    go_to_page(0)
