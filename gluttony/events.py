"""Window, application and input events with a type-based dispatcher."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, ClassVar


class EventType(enum.IntEnum):
    """Kind of an event; every event class carries exactly one."""

    NONE = 0
    WINDOW_CLOSE = 1
    WINDOW_REFRESH = 2
    WINDOW_RESIZE = 3
    WINDOW_FOCUS = 4
    WINDOW_LOST_FOCUS = 5
    WINDOW_MOVED = 6
    APP_TICK = 7
    APP_UPDATE = 8
    APP_RENDER = 9
    KEY_PRESSED = 10
    KEY_RELEASED = 11
    MOUSE_BUTTON_PRESSED = 12
    MOUSE_BUTTON_RELEASED = 13
    MOUSE_MOVED = 14
    MOUSE_SCROLLED = 15


class EventCategory(enum.IntFlag):
    """Bit flags grouping events; an event may belong to several."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    BUTTON = 1 << 4


class KeyCode(enum.IntEnum):
    """Keyboard keys, mouse buttons and mouse axes (keys use GLFW numbering)."""

    MOUSE_BU_LEFT = 0
    MOUSE_BU_RIGHT = 1
    MOUSE_BU_MIDDLE = 2
    MOUSE_BU_4 = 3
    MOUSE_BU_5 = 4

    KEY_SPACE = 32
    KEY_APOSTROPHE = 39
    KEY_COMMA = 44
    KEY_MINUS = 45
    KEY_PERIOD = 46
    KEY_SLASH = 47
    KEY_0 = 48
    KEY_1 = 49
    KEY_2 = 50
    KEY_3 = 51
    KEY_4 = 52
    KEY_5 = 53
    KEY_6 = 54
    KEY_7 = 55
    KEY_8 = 56
    KEY_9 = 57
    KEY_SEMICOLON = 59
    KEY_EQUAL = 61
    KEY_A = 65
    KEY_B = 66
    KEY_C = 67
    KEY_D = 68
    KEY_E = 69
    KEY_F = 70
    KEY_G = 71
    KEY_H = 72
    KEY_I = 73
    KEY_J = 74
    KEY_K = 75
    KEY_L = 76
    KEY_M = 77
    KEY_N = 78
    KEY_O = 79
    KEY_P = 80
    KEY_Q = 81
    KEY_R = 82
    KEY_S = 83
    KEY_T = 84
    KEY_U = 85
    KEY_V = 86
    KEY_W = 87
    KEY_X = 88
    KEY_Y = 89
    KEY_Z = 90

    KEY_ESCAPE = 256
    KEY_ENTER = 257
    KEY_TAB = 258
    KEY_BACKSPACE = 259
    KEY_INSERT = 260
    KEY_DELETE = 261
    KEY_RIGHT = 262
    KEY_LEFT = 263
    KEY_DOWN = 264
    KEY_UP = 265

    KEY_LEFT_SHIFT = 340
    KEY_LEFT_CONTROL = 341
    KEY_LEFT_ALT = 342
    KEY_RIGHT_SHIFT = 344
    KEY_RIGHT_CONTROL = 345
    KEY_RIGHT_ALT = 346

    MOUSE_MOVED_X = 400
    MOUSE_MOVED_Y = 401
    MOUSE_SCROLLED_X = 402
    MOUSE_SCROLLED_Y = 403


class KeyState(enum.IntEnum):
    """State reported with a key or mouse-button event."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


@dataclass
class Event:
    """Base of all events; ``handled`` is set once a handler consumed it."""

    event_type: ClassVar[EventType] = EventType.NONE
    category: ClassVar[EventCategory] = EventCategory.NONE
    name: ClassVar[str] = "None"

    handled: bool = field(default=False, kw_only=True, compare=False)

    def is_in_category(self, category: EventCategory) -> bool:
        return bool(self.category & category)

    def __str__(self) -> str:
        return self.name


class EventDispatcher:
    """Routes one event to a handler when its type matches."""

    def __init__(self, event: Event) -> None:
        self.event = event

    def dispatch(self, event_class: type[Event], func: Callable[[Event], bool]) -> bool:
        """Call ``func`` if the event is of ``event_class``'s type; store its result in ``handled``."""
        if self.event.event_type != event_class.event_type:
            return False
        self.event.handled = bool(func(self.event))
        return True


@dataclass
class WindowResizeEvent(Event):
    event_type: ClassVar[EventType] = EventType.WINDOW_RESIZE
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "WindowResize"

    width: int
    height: int

    def __str__(self) -> str:
        return f"event - window resize event [{self.width}, {self.height}]"


@dataclass
class WindowFocusEvent(Event):
    event_type: ClassVar[EventType] = EventType.WINDOW_FOCUS
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "WindowFocus"

    focus: bool

    def __str__(self) -> str:
        return "event - window focus event"


@dataclass
class WindowCloseEvent(Event):
    event_type: ClassVar[EventType] = EventType.WINDOW_CLOSE
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "WindowClose"


@dataclass
class WindowRefreshEvent(Event):
    event_type: ClassVar[EventType] = EventType.WINDOW_REFRESH
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "WindowRefresh"


@dataclass
class AppTickEvent(Event):
    event_type: ClassVar[EventType] = EventType.APP_TICK
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "AppTick"


@dataclass
class AppUpdateEvent(Event):
    event_type: ClassVar[EventType] = EventType.APP_UPDATE
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "AppUpdate"


@dataclass
class AppRenderEvent(Event):
    event_type: ClassVar[EventType] = EventType.APP_RENDER
    category: ClassVar[EventCategory] = EventCategory.APPLICATION
    name: ClassVar[str] = "AppRender"


@dataclass
class KeyEvent(Event):
    """A key or mouse button changed state."""

    event_type: ClassVar[EventType] = EventType.NONE
    category: ClassVar[EventCategory] = EventCategory.KEYBOARD | EventCategory.INPUT
    name: ClassVar[str] = "None"

    keycode: KeyCode
    key_state: KeyState

    def __str__(self) -> str:
        return f"event - key: {int(self.keycode)} state: {int(self.key_state)}"


@dataclass
class MouseEvent(Event):
    """Movement or scrolling along one mouse axis; ``value`` is the delta."""

    event_type: ClassVar[EventType] = EventType.MOUSE_MOVED
    category: ClassVar[EventCategory] = EventCategory.MOUSE | EventCategory.INPUT
    name: ClassVar[str] = "MouseMoved"

    keycode: KeyCode
    value: float

    def __str__(self) -> str:
        return f"event - mouse moved [{self.value:>4g}]"