import pytest

from gluttony.events import (
    AppRenderEvent,
    AppTickEvent,
    AppUpdateEvent,
    Event,
    EventCategory,
    EventDispatcher,
    EventType,
    KeyCode,
    KeyEvent,
    KeyState,
    MouseEvent,
    WindowCloseEvent,
    WindowFocusEvent,
    WindowRefreshEvent,
    WindowResizeEvent,
)


def test_category_bits_follow_source():
    assert EventCategory.APPLICATION == 1
    assert EventCategory.INPUT == 2
    assert EventCategory.KEYBOARD == 4
    assert EventCategory.MOUSE == 8
    assert EventCategory.BUTTON == 16
    key = KeyEvent(KeyCode.KEY_W, KeyState.PRESS)
    assert key.is_in_category(EventCategory.MOUSE | EventCategory.KEYBOARD)
    mouse = MouseEvent(KeyCode.MOUSE_MOVED_X, 1.0)
    assert not mouse.is_in_category(EventCategory.APPLICATION | EventCategory.BUTTON)


def test_key_event_categories():
    event = KeyEvent(KeyCode.KEY_W, KeyState.PRESS)
    assert event.is_in_category(EventCategory.INPUT)
    assert event.is_in_category(EventCategory.KEYBOARD)
    assert not event.is_in_category(EventCategory.MOUSE)
    assert not event.is_in_category(EventCategory.APPLICATION)


def test_mouse_event_categories():
    event = MouseEvent(KeyCode.MOUSE_MOVED_X, 1.0)
    assert event.is_in_category(EventCategory.MOUSE)
    assert event.is_in_category(EventCategory.INPUT)
    assert not event.is_in_category(EventCategory.KEYBOARD)


@pytest.mark.parametrize(
    "event",
    [
        WindowResizeEvent(10, 20),
        WindowFocusEvent(True),
        WindowCloseEvent(),
        WindowRefreshEvent(),
        AppTickEvent(),
        AppUpdateEvent(),
        AppRenderEvent(),
    ],
)
def test_application_events_are_application_category(event):
    assert event.is_in_category(EventCategory.APPLICATION)
    assert not event.is_in_category(EventCategory.INPUT)
    assert event.handled is False


def test_event_types_and_names():
    assert WindowCloseEvent().event_type is EventType.WINDOW_CLOSE
    assert WindowResizeEvent(1, 2).name == "WindowResize"
    assert str(WindowCloseEvent()) == "WindowClose"
    assert KeyEvent(KeyCode.KEY_A, KeyState.RELEASE).event_type is EventType.NONE
    assert MouseEvent(KeyCode.MOUSE_MOVED_Y, 0.0).event_type is EventType.MOUSE_MOVED


def test_string_forms():
    assert str(WindowResizeEvent(800, 600)) == "event - window resize event [800, 600]"
    assert str(WindowFocusEvent(False)) == "event - window focus event"
    key = KeyEvent(KeyCode.KEY_W, KeyState.PRESS)
    assert str(key) == f"event - key: {int(KeyCode.KEY_W)} state: {int(KeyState.PRESS)}"
    assert str(MouseEvent(KeyCode.MOUSE_MOVED_X, 2.5)) == "event - mouse moved [ 2.5]"


def test_dispatch_matching_type_sets_handled():
    event = WindowResizeEvent(640, 480)
    seen = []

    def handler(e):
        seen.append((e.width, e.height))
        return True

    assert EventDispatcher(event).dispatch(WindowResizeEvent, handler) is True
    assert event.handled is True
    assert seen == [(640, 480)]


def test_dispatch_other_type_does_nothing():
    event = WindowCloseEvent()
    calls = []
    result = EventDispatcher(event).dispatch(WindowResizeEvent, lambda e: calls.append(e) or True)
    assert result is False
    assert calls == []
    assert event.handled is False


def test_dispatch_handler_result_false_leaves_unhandled():
    event = WindowFocusEvent(True)
    assert EventDispatcher(event).dispatch(WindowFocusEvent, lambda e: False) is True
    assert event.handled is False


def test_dispatch_chain_only_one_matches():
    event = KeyEvent(KeyCode.KEY_S, KeyState.REPEAT)
    dispatcher = EventDispatcher(event)
    hits = []
    dispatcher.dispatch(KeyEvent, lambda e: hits.append("key") or True)
    dispatcher.dispatch(MouseEvent, lambda e: hits.append("mouse") or True)
    assert hits == ["key"]
    assert event.handled is True


def test_equality_ignores_handled():
    a = WindowResizeEvent(3, 4)
    b = WindowResizeEvent(3, 4, handled=True)
    assert a == b
    assert isinstance(a, Event)