"""
End-to-end tests of one import pass against the in-memory host.
"""

import asyncio

import pytest

from slidegraph.application.event_bus import EventBus, Events
from slidegraph.core.cancellation import CancellationToken
from slidegraph.models.presentation import Presentation
from slidegraph.models.scene import WHITE, ResolvedFont
from slidegraph.services.import_orchestrator import ImportOrchestrator
from slidegraph.services.memory_host import InMemorySceneHost

from conftest import deck


TITLE = {
    "type": "shape",
    "x": 100, "y": 100, "width": 800, "height": 120,
    "fillColor": {"r": 0.1, "g": 0.2, "b": 0.6},
    "text": {"runs": [{"text": "Quarterly review", "fontFamily": "Roboto", "fontWeight": 700, "fontSize": 40}]},
}


def recording_bus():
    bus = EventBus()
    messages = []
    bus.subscribe_all(messages.append)
    return bus, messages


async def run_import(host, config, payload, image_data=None, **kwargs):
    bus, messages = recording_bus()
    orchestrator = ImportOrchestrator(host, event_bus=bus, config=config, **kwargs)
    result = await orchestrator.run(Presentation.model_validate(payload), image_data)
    return result, messages


async def test_two_slides_report_progress_then_complete(host, config):
    result, messages = await run_import(host, config, deck([TITLE], [TITLE]))

    assert messages == [
        {"type": "progress", "percent": 60, "text": "Creating slide 1 of 2..."},
        {"type": "progress", "percent": 77.5, "text": "Creating slide 2 of 2..."},
        {"type": "complete", "slideCount": 2},
    ]
    assert result.succeeded
    assert result.slide_count == 2


async def test_frames_are_laid_out_in_a_row(host, config):
    result, _ = await run_import(host, config, deck([], [], []))

    frames = host.page
    assert [frame.name for frame in frames] == ["Slide 1", "Slide 2", "Slide 3"]
    assert [frame.x for frame in frames] == [0, 2020, 4040]
    assert all(frame.y == 0 for frame in frames)
    assert all((frame.width, frame.height) == (1920, 1080) for frame in frames)
    assert all(frame.fills == [WHITE] for frame in frames)
    assert host.selection == frames
    assert result.frames == frames


async def test_no_fit_keeps_page_size(host, config):
    config.canvas.fit_to_canvas = False
    await run_import(host, config, deck([], [], width=720, height=405))

    assert [(frame.width, frame.height) for frame in host.page] == [(720, 405), (720, 405)]
    assert host.page[1].x == 820


async def test_progress_percent_is_monotonic(host, config):
    _, messages = await run_import(host, config, deck(*([[]] * 7)))

    percents = [message["percent"] for message in messages if message["type"] == "progress"]
    assert len(percents) == 7
    assert percents == sorted(percents)
    assert percents[0] == 60
    assert percents[-1] < 95


async def test_empty_presentation_is_an_error(host, config):
    result, messages = await run_import(host, config, deck())

    assert messages == [{"type": "error", "message": "No slides found in presentation"}]
    assert result.error == "No slides found in presentation"
    assert host.page == []


async def test_missing_image_does_not_fail_the_import(host, config):
    image = {"type": "image", "imageUrl": "https://example.com/missing.png", "width": 100, "height": 100}

    result, messages = await run_import(host, config, deck([image, TITLE]))

    assert messages[-1] == {"type": "complete", "slideCount": 1}
    names = [node.name for node in host.page[0].children]
    assert names[0] == "Image (failed to load)"
    assert result.failures == []


async def test_element_failures_are_reported_not_raised(host, config, monkeypatch):
    def broken_line():
        raise RuntimeError("no lines")

    monkeypatch.setattr(host, "create_line", broken_line)
    line = {"type": "line", "width": 10, "height": 10}

    result, messages = await run_import(host, config, deck([line, TITLE], [TITLE]))

    assert messages[-1] == {"type": "complete", "slideCount": 2}
    assert [(report.index, failure.path) for report in result.slides for failure in report.failures] == [(0, "0")]
    assert len(host.page[0].children) == 2


async def test_no_usable_font_is_a_terminal_error(config):
    host = InMemorySceneHost(available_fonts=[])

    result, messages = await run_import(host, config, deck([TITLE], [TITLE]))

    assert [message["type"] for message in messages] == ["progress", "error"]
    assert "Arial Regular" in messages[-1]["message"]
    assert result.error is not None
    # Nodes created before the failure are left in place
    assert len(host.page) == 1
    assert [node.node_type for node in host.page[0].children] == ["RECTANGLE"]


async def test_pre_cancelled_import_creates_nothing(host, config):
    token = CancellationToken()
    token.cancel()

    result, messages = await run_import(host, config, deck([TITLE]), cancel_token=token)

    assert messages == [{"type": "cancelled", "slideCount": 0}]
    assert result.cancelled
    assert host.page == []


async def test_cancel_between_slides(host, config):
    bus = EventBus()
    token = CancellationToken()
    messages = []

    def on_event(message):
        messages.append(message)
        if message["type"] == Events.PROGRESS and len(messages) == 2:
            token.cancel()

    bus.subscribe_all(on_event)
    orchestrator = ImportOrchestrator(host, event_bus=bus, config=config, cancel_token=token)
    result = await orchestrator.run(Presentation.model_validate(deck([TITLE], [TITLE], [TITLE])))

    assert [message["type"] for message in messages] == ["progress", "progress", "cancelled"]
    assert messages[-1]["slideCount"] == 1
    assert result.slide_count == 1
    assert len(host.page) == 1
    assert host.selection == []


async def test_import_is_deterministic(config, png_data_uri):
    payload = deck(
        [TITLE, {"type": "image", "imageUrl": "logo", "x": 10, "y": 10, "width": 64, "height": 64}],
        [{"type": "table", "width": 400, "height": 100, "rows": [["Q1", "Q2"], ["10", "12"]]}],
        width=960, height=540,
    )
    first, second = InMemorySceneHost(), InMemorySceneHost()

    await run_import(first, config, payload, {"logo": png_data_uri})
    await run_import(second, config, payload, {"logo": png_data_uri})

    assert first.to_dict() == second.to_dict()


async def test_fonts_are_loaded_once_per_import(host, config):
    await run_import(host, config, deck([TITLE, TITLE], [TITLE]))

    assert host.font_requests.count(ResolvedFont("Roboto", "Bold")) == 1


async def test_failing_subscriber_does_not_break_the_import(host, config):
    bus = EventBus()

    def broken(message):
        raise RuntimeError("ui went away")

    bus.subscribe(Events.PROGRESS, broken)
    result = await ImportOrchestrator(host, event_bus=bus, config=config).run(
        Presentation.model_validate(deck([TITLE]))
    )

    assert result.succeeded
    assert len(host.page) == 1


@pytest.mark.parametrize("unit,width,height", [("EMU", 9144000, 5143500), ("PT", 720, 405)])
async def test_page_units_give_the_same_canvas(host, config, unit, width, height):
    payload = deck([TITLE], width=width, height=height, unit=unit)
    await run_import(host, config, payload)

    title = host.page[0].children[0]
    assert title.x == pytest.approx(100 * 1920 / 720)
    assert title.width == pytest.approx(800 * 1920 / 720)


async def test_rectangle_and_helvetica_text_deck(host, config):
    red_box = {"type": "shape", "width": 200, "height": 100, "fillColor": {"r": 1, "g": 0, "b": 0}}
    greeting = {
        "type": "shape", "width": 300, "height": 80,
        "text": {"runs": [{"text": "Hello", "fontFamily": "Helvetica", "fontWeight": 400}]},
    }

    result, messages = await run_import(host, config, deck([red_box], [greeting]))

    assert [message["type"] for message in messages] == ["progress", "progress", "complete"]
    assert messages[-1] == {"type": "complete", "slideCount": 2}

    first, second = host.page
    assert [node.node_type for node in first.children] == ["RECTANGLE"]
    text = second.children[1]
    assert text.characters == "Hello"
    assert text.font_name.as_font_name() == {"family": "Inter", "style": "Regular"}


async def test_rerun_creates_the_same_structure(config):
    payload = deck([TITLE, TITLE], [], [TITLE])
    counts = []
    for _ in range(2):
        host = InMemorySceneHost()
        result, _ = await run_import(host, config, payload)
        counts.append((len(host.page), [report.node_count for report in result.slides]))

    assert counts[0] == counts[1] == (3, [4, 0, 2])


async def test_cancel_while_a_font_is_loading(config):
    host = InMemorySceneHost(font_load_delay=0.05)
    token = CancellationToken()
    bus, messages = recording_bus()
    orchestrator = ImportOrchestrator(host, event_bus=bus, config=config, cancel_token=token)

    task = asyncio.create_task(orchestrator.run(Presentation.model_validate(deck([TITLE], [TITLE]))))
    await asyncio.sleep(0.01)
    token.cancel()
    result = await task

    assert result.cancelled
    assert messages[-1] == {"type": "cancelled", "slideCount": 0}
    # The shape was created before the font load; its text never is
    assert [node.node_type for node in host.page[0].children] == ["RECTANGLE"]
    assert len(host.page) == 1
