"""Editor camera controls: the editor's input mapping and the free-fly controller."""

from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np

from gluttony.camera import Camera
from gluttony.events import KeyCode
from gluttony.player_controller import (
    ActionType,
    InputAction,
    InputMapping,
    KeyBinding,
    Modifier,
    PlayerController,
    Trigger,
)

_log = logging.getLogger(__name__)

MAX_PITCH = math.radians(89.0)
MIN_PITCH = math.radians(-89.0)
MIN_MOVE_SPEED = 1.0
MAX_MOVE_SPEED = 100000.0
DEFAULT_MOVE_SPEED = 50.0
ORBIT_SENSITIVITY = 0.2
LOOK_SENSITIVITY = 0.1


def _transform_action(name: str, key: KeyCode, operation: str) -> InputAction:
    return InputAction(
        name=name,
        description=f"set transform operation to {operation}",
        flags=Modifier.AUTO_RESET_ALL,
        value=ActionType.BOOLEAN,
        duration_in_sec=0.0,
        key_bindings=[KeyBinding(key, Trigger.KEY_MOVE_DOWN)],
    )


class EditorInputs(InputMapping):
    """Input actions used by the editor camera."""

    def __init__(self) -> None:
        super().__init__()

        self.move = self.register_action(InputAction(
            name="move",
            description="reposition the editor camera",
            flags=Modifier.SMOOTH_INTERP | Modifier.USE_VEC_NORMAL | Modifier.AUTO_RESET,
            value=ActionType.VEC_3D,
            duration_in_sec=0.5,
            key_bindings=[
                KeyBinding(KeyCode.KEY_W, Trigger.KEY_DOWN, Modifier.NEGATE),
                KeyBinding(KeyCode.KEY_S, Trigger.KEY_DOWN),
                KeyBinding(KeyCode.KEY_A, Trigger.KEY_DOWN, Modifier.AXIS_2 | Modifier.NEGATE),
                KeyBinding(KeyCode.KEY_D, Trigger.KEY_DOWN, Modifier.AXIS_2),
                KeyBinding(KeyCode.KEY_SPACE, Trigger.KEY_DOWN, Modifier.AXIS_3 | Modifier.NEGATE),
                KeyBinding(KeyCode.KEY_LEFT_SHIFT, Trigger.KEY_DOWN, Modifier.AXIS_3),
            ],
        ))

        self.capture_mouse = self.register_action(InputAction(
            name="capture_mouse",
            description="right click to change the camera orientation",
            value=ActionType.BOOLEAN,
            duration_in_sec=0.5,
            key_bindings=[KeyBinding(KeyCode.MOUSE_BU_RIGHT, Trigger.KEY_DOWN)],
        ))

        self.change_rotation_origin = self.register_action(InputAction(
            name="change_rotation_origin",
            description="left control to let the camera rotate around the origin",
            value=ActionType.BOOLEAN,
            duration_in_sec=0.5,
            key_bindings=[KeyBinding(KeyCode.KEY_LEFT_CONTROL, Trigger.KEY_DOWN)],
        ))

        self.look = self.register_action(InputAction(
            name="look",
            description="change the direction of the editor camera",
            flags=Modifier.AUTO_RESET_ALL | Modifier.SMOOTH_INTERP,
            value=ActionType.VEC_2D,
            duration_in_sec=0.5,
            key_bindings=[
                KeyBinding(KeyCode.MOUSE_MOVED_X, Trigger.MOUSE_POS_AND_NEG, Modifier.NEGATE),
                KeyBinding(KeyCode.MOUSE_MOVED_Y, Trigger.MOUSE_POS_AND_NEG, Modifier.AXIS_2 | Modifier.NEGATE),
            ],
        ))

        self.change_move_speed = self.register_action(InputAction(
            name="change_move_speed",
            description="increase/decrease the movement speed of the editor camera",
            flags=Modifier.AUTO_RESET_ALL,
            value=ActionType.VEC_1D,
            duration_in_sec=0.5,
            key_bindings=[KeyBinding(KeyCode.MOUSE_SCROLLED_Y, Trigger.MOUSE_POS_AND_NEG)],
        ))

        self.toggle_fps = self.register_action(InputAction(
            name="toggle_fps",
            description="toggle the fps limiter",
            flags=Modifier.AUTO_RESET_ALL,
            value=ActionType.BOOLEAN,
            duration_in_sec=0.0,
            key_bindings=[KeyBinding(KeyCode.KEY_P, Trigger.KEY_MOVE_DOWN)],
        ))

        self.transform_operation_to_translate = self.register_action(
            _transform_action("transform_operation_to_translate", KeyCode.KEY_E, "translate"))
        self.transform_operation_to_rotate = self.register_action(
            _transform_action("transform_operation_to_rotate", KeyCode.KEY_R, "rotate"))
        self.transform_operation_to_scale = self.register_action(
            _transform_action("transform_operation_to_scale", KeyCode.KEY_T, "scale"))


class EditorController(PlayerController):
    """Free-fly editor camera: mouse look, WASD movement, scroll speed and orbiting."""

    def __init__(
        self,
        camera: Camera | None = None,
        on_toggle_fps: Callable[[], None] | None = None,
    ) -> None:
        super().__init__()
        _log.debug("init editor controller")
        self.camera = camera
        self.on_toggle_fps = on_toggle_fps
        if camera is not None:
            self.camera_pos = np.array(camera.position, dtype=float)
            self.camera_direction = np.array(camera.direction, dtype=float)
        else:
            self.camera_pos = np.array([0.0, 0.0, -5.0])
            self.camera_direction = np.zeros(3)
        self.move_speed = DEFAULT_MOVE_SPEED
        self.inputs: EditorInputs = self.register_mapping(EditorInputs())

    def update(self, delta_time: float) -> None:
        """Apply the evaluated editor inputs to the camera."""
        inputs = self.inputs
        if inputs.capture_mouse.data:
            if inputs.change_rotation_origin.data:
                self._orbit(delta_time)
            else:
                self._fly(delta_time)
            if self.camera is not None:
                self.camera.set_view_xyz(self.camera_pos, self.camera_direction)

        if inputs.toggle_fps.data and self.on_toggle_fps is not None:
            self.on_toggle_fps()

    def _orbit(self, delta_time: float) -> None:
        look_x = float(self.inputs.look.data[0])
        angle = look_x * delta_time * ORBIT_SENSITIVITY
        c, s = math.cos(angle), math.sin(angle)
        x, y, z = self.camera_pos
        self.camera_pos = np.array([c * x + s * z, y, -s * x + c * z])
        self.camera_direction[1] += look_x * delta_time

    def _fly(self, delta_time: float) -> None:
        inputs = self.inputs
        look = inputs.look.data
        self.camera_direction[1] += float(look[0]) * LOOK_SENSITIVITY * delta_time
        self.camera_direction[0] += float(look[1]) * LOOK_SENSITIVITY * delta_time
        self.camera_direction[0] = min(max(self.camera_direction[0], MIN_PITCH), MAX_PITCH)

        scroll = float(inputs.change_move_speed.data)
        if scroll != 0:
            self.move_speed += self.move_speed * 0.1 * scroll
            self.move_speed = min(max(self.move_speed, MIN_MOVE_SPEED), MAX_MOVE_SPEED)

        yaw = self.camera_direction[1]
        pitch = self.camera_direction[0]
        forward = np.array([
            math.cos(pitch) * math.sin(-yaw),
            math.sin(pitch),
            math.cos(pitch) * math.cos(yaw),
        ])
        right = np.array([forward[2], 0.0, -forward[0]])
        down = np.array([0.0, -1.0, 0.0])

        move = inputs.move.data
        step = self.move_speed * delta_time
        self.camera_pos = (
            self.camera_pos
            + forward * (float(move[0]) * step)
            + right * (float(move[1]) * step)
            + down * (float(move[2]) * step)
        )