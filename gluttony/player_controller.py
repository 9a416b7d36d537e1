"""Input actions, their key bindings and the controller that evaluates them."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np

from gluttony.events import (
    Event,
    EventCategory,
    EventDispatcher,
    KeyCode,
    KeyEvent,
    KeyState,
    MouseEvent,
)

_log = logging.getLogger(__name__)

_FLOAT32_EPSILON = float(np.finfo(np.float32).eps)


class ActionType(enum.Enum):
    """Shape of the value an input action produces."""

    BOOLEAN = "boolean"
    VEC_1D = "vec_1d"
    VEC_2D = "vec_2d"
    VEC_3D = "vec_3d"

    def default(self) -> Any:
        """Fresh zero value for this action type."""
        if self is ActionType.BOOLEAN:
            return False
        if self is ActionType.VEC_1D:
            return 0.0
        if self is ActionType.VEC_2D:
            return np.zeros(2)
        return np.zeros(3)


class Trigger(enum.IntFlag):
    """Conditions under which a key binding becomes active."""

    NONE = 0
    KEY_DOWN = 1 << 0
    KEY_UP = 1 << 1
    KEY_HOLD = 1 << 2
    KEY_TAP = 1 << 3
    KEY_MOVE_DOWN = 1 << 4
    KEY_MOVE_UP = 1 << 5
    MOUSE_POSITIVE = 1 << 10
    MOUSE_NEGATIVE = 1 << 11
    MOUSE_POS_AND_NEG = 1 << 12


class Modifier(enum.IntFlag):
    """Modifiers for bindings and actions."""

    NONE = 0
    NEGATE = 1 << 0
    SMOOTH_INTERP = 1 << 1
    AXIS_2 = 1 << 2
    AXIS_3 = 1 << 3
    AUTO_RESET = 1 << 4
    AUTO_RESET_ALL = 1 << 5
    USE_VEC_NORMAL = 1 << 6


@dataclass(eq=False)
class KeyBinding:
    """A key or mouse axis feeding an action; ``active`` holds its current input."""

    key: KeyCode
    trigger: Trigger = Trigger.NONE
    modifier: Modifier = Modifier.NONE
    active: int = 0


@dataclass(eq=False)
class InputAction:
    """A named input whose ``data`` is computed from its key bindings each frame."""

    name: str = ""
    value: ActionType = ActionType.BOOLEAN
    flags: Modifier = Modifier.NONE
    key_bindings: list[KeyBinding] = field(default_factory=list)
    description: str = ""
    trigger_when_paused: bool = False
    duration_in_sec: float = 0.0
    time_stamp: float | None = None
    data: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Set ``data`` back to the zero value of the action's type."""
        self.data = self.value.default()


class InputMapping:
    """Ordered collection of input actions."""

    def __init__(self) -> None:
        self.actions: list[InputAction] = []

    def register_action(self, action: InputAction) -> InputAction:
        self.actions.append(action)
        return action

    def __iter__(self) -> Iterator[InputAction]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


class PlayerController:
    """Feeds input events into an input mapping and evaluates its actions."""

    def __init__(self, mapping: InputMapping | None = None) -> None:
        self.world_layer: Any = None
        self.input_mapping: InputMapping | None = mapping

    def register_mapping(self, mapping: InputMapping) -> InputMapping:
        _log.debug("register input mapping")
        self.input_mapping = mapping
        return mapping

    def update(self, delta_time: float) -> None:
        """Per-frame hook for subclasses; runs after actions are evaluated."""

    def _mapping(self) -> InputMapping:
        if self.input_mapping is None:
            raise RuntimeError("input mapping is not set")
        return self.input_mapping

    def update_internal(self, delta_time: float) -> None:
        """Evaluate every action from its bindings, call ``update``, then clear bindings as flagged."""
        mapping = self._mapping()

        for action in mapping:
            if action.flags & (Modifier.AUTO_RESET | Modifier.AUTO_RESET_ALL):
                action.reset()

        for action in mapping:
            for binding in action.key_bindings:
                amount = float(binding.active)
                if binding.modifier & Modifier.NEGATE:
                    amount = -amount
                if binding.modifier & Modifier.SMOOTH_INTERP:
                    _log.info("smooth interpolation is not supported yet")
                self._apply(action, binding, amount)

            if action.flags & Modifier.USE_VEC_NORMAL:
                self._normalize(action)

        self.update(delta_time)

        for action in mapping:
            if action.flags & Modifier.AUTO_RESET_ALL:
                for binding in action.key_bindings:
                    binding.active = 0

    @staticmethod
    def _apply(action: InputAction, binding: KeyBinding, amount: float) -> None:
        if action.value is ActionType.BOOLEAN:
            action.data = amount > 0.0
        elif action.value is ActionType.VEC_1D:
            action.data += amount
        elif action.value is ActionType.VEC_2D:
            axis = 1 if binding.modifier & Modifier.AXIS_2 else 0
            action.data[axis] += amount
        elif action.value is ActionType.VEC_3D:
            if binding.modifier & Modifier.AXIS_2:
                axis = 1
            elif binding.modifier & Modifier.AXIS_3:
                axis = 2
            else:
                axis = 0
            action.data[axis] += amount

    @staticmethod
    def _normalize(action: InputAction) -> None:
        if action.value is ActionType.VEC_1D:
            action.data = min(max(action.data, -1.0), 1.0)
        elif action.value in (ActionType.VEC_2D, ActionType.VEC_3D):
            length_sq = float(np.dot(action.data, action.data))
            if length_sq > _FLOAT32_EPSILON:
                action.data = action.data / np.sqrt(length_sq)

    def handle_event(self, event: Event) -> None:
        """Route input events to the key or mouse handler."""
        if not event.is_in_category(EventCategory.INPUT):
            return
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(KeyEvent, self._handle_key_event)
        dispatcher.dispatch(MouseEvent, self._handle_mouse_event)

    def _handle_key_event(self, event: KeyEvent) -> bool:
        mapping = self._mapping()
        for action in mapping:
            for binding in action.key_bindings:
                if binding.key != event.keycode:
                    continue
                binding.active = 1 if self._key_triggered(action, binding, event.key_state) else 0
        return True

    @staticmethod
    def _key_triggered(action: InputAction, binding: KeyBinding, state: KeyState) -> bool:
        trigger = binding.trigger
        if trigger & Trigger.KEY_DOWN and state != KeyState.RELEASE:
            return True
        if trigger & Trigger.KEY_UP and state == KeyState.RELEASE:
            return True
        if trigger & Trigger.KEY_HOLD and state == KeyState.REPEAT:
            return True
        if trigger & Trigger.KEY_TAP:
            _log.warning("key tap trigger is not implemented yet")
            action.time_stamp = time.monotonic()
        if trigger & Trigger.KEY_MOVE_DOWN and state == KeyState.PRESS and binding.active == 0:
            return True
        if trigger & Trigger.KEY_MOVE_UP and state == KeyState.REPEAT:
            return True
        return False

    def _handle_mouse_event(self, event: MouseEvent) -> bool:
        mapping = self._mapping()
        value = float(event.value)
        for action in mapping:
            for binding in action.key_bindings:
                if binding.key != event.keycode:
                    continue
                trigger = binding.trigger
                triggered = (
                    (bool(trigger & Trigger.MOUSE_POS_AND_NEG) and value != 0)
                    or (bool(trigger & Trigger.MOUSE_POSITIVE) and value > 0)
                    or (bool(trigger & Trigger.MOUSE_NEGATIVE) and value < 0)
                )
                binding.active = int(value) if triggered else 0
        return False