# gluttony

This package holds the core logic of a small ray-tracing renderer. It needs neither a window nor a GPU. Its only dependency is numpy.

## Modules

### Events (`gluttony.events`)

- `EventType`, `EventCategory` (bit flags), `KeyCode` and `KeyState`.
- An `Event` base class. `Event.is_in_category()` tells whether an event belongs to a category, and `handled` records whether a handler consumed the event.
- The concrete events:
  - `WindowResizeEvent`, `WindowFocusEvent`, `WindowCloseEvent` and `WindowRefreshEvent`.
  - `AppTickEvent`, `AppUpdateEvent` and `AppRenderEvent`.
  - `KeyEvent` (keys and mouse buttons).
  - `MouseEvent` (a delta along one mouse axis).
- `EventDispatcher(event).dispatch(EventClass, func)`. It calls `func` only when the event has that class's type, and it stores the result in `event.handled`.

### Camera (`gluttony.camera`)

`Camera` keeps a `position`, a `direction`, clipping distances, and 4×4 `view` and `projection` matrices. The matrices are numpy arrays that act on column vectors.

- **View.** The view matrix can be built from a direction (`set_view_direction`), from a target (`set_view_target`), or from Euler rotations in radians (`set_view_xyz`, `set_view_yxz`). `set_view_target` raises `ValueError` when the position and the target are the same point.
- **Projection.**
  - `set_orthographic_projection` and `set_perspective_projection` build the projection matrix. Depth is mapped to [0, 1] and `fov_y` is given in radians.
  - `set_perspective_projection` raises `ValueError` when the aspect ratio is zero or close to zero.
  - `set_aspect_ratio` and `set_fov_y` rebuild the perspective projection.
- **Inverses.** `inverse_view()` and `inverse_projection()` return the inverse matrices. `inverse_projection(aspect_ratio)` instead inverts a fresh right-handed perspective. That perspective comes from the module-level `perspective()` helper, and it reads the camera's `fov_y` as degrees.
- **Field of view.** `auto_calc_fov(image_size)` sets `fov_y`, in degrees, so that the horizontal field of view is 100°.

### Components (`gluttony.components`)

`TransformComponent` wraps a 4×4 transform. It raises `ValueError` for any other shape. `translated(offset)` returns a new component that is moved by the offset in local space.

### Meshes and BVHs (`gluttony.mesh`)

- `Vertex` packs into a 32-byte layout: position, uv_x, normal, uv_y.
- `BVHNode` packs into a 32-byte layout. `is_leaf()` is true when the node holds triangles.
- `StaticMesh.build_bvh(target_tri_count=32)` builds the bounding-volume hierarchy.
  - It chooses splits with a binned surface-area heuristic that uses 8 bins. When no useful split exists, it falls back to a median split.
  - It never creates a child with fewer than two triangles.
  - It raises `IndexError` when an index refers to a vertex that does not exist.
  - It records `bvh_build_time` in microseconds and fills `bvh_stats`.
- `StaticMesh.compute_bvh_stats()` returns a `BVHStats` with the leaf count, the maximum and average number of triangles per leaf, and the depth.

### Input (`gluttony.player_controller`)

- `KeyBinding` connects a key or mouse axis to an action. Its `Trigger` flags say when it becomes active: key down or up, hold, press edge, or a positive or negative mouse value. Its `Modifier` flags can negate the value or select axis 2 or 3.
- `InputAction` collects the values of its bindings into `data`. The `ActionType` sets the shape of `data`: a boolean, a float, or a 2- or 3-component numpy vector.
- The `Modifier` flags on an action can reset its data every frame, clear its bindings after each update, or normalise the vector.
- `InputMapping` is an ordered collection of actions.
- `PlayerController`:
  - `handle_event(event)` feeds key and mouse events into the mapping.
  - `update_internal(delta_time)` evaluates the actions and then calls the overridable `update(delta_time)` hook.
  - Without a mapping, both methods raise `RuntimeError`.

### Editor camera (`gluttony.editor`)

`EditorInputs` is a ready-made mapping:

| Input | Action |
| --- | --- |
| W / S / A / D / Space / Left Shift | movement |
| Right mouse button | mouse capture |
| Left Control | orbit around the origin |
| Mouse movement | look |
| Scroll wheel | change move speed |
| P | FPS toggle |
| E / R / T | transform operation |

`EditorController(camera=None, on_toggle_fps=None)` flies a camera with these inputs, but only while the right mouse button is held.

- Pitch is clamped to ±89°.
- Scrolling changes `move_speed` by 10% per step, within the range 1 to 100000.
- Holding Left Control orbits the camera around the y axis.
- Pressing P calls `on_toggle_fps`.

## Installation

```
pip install .
```

To also install the test dependency:

```
pip install ".[test]"
```

## Example

```python
import numpy as np

from gluttony.camera import Camera
from gluttony.editor import EditorController
from gluttony.events import KeyCode, KeyEvent, KeyState
from gluttony.mesh import StaticMesh, Vertex

camera = Camera()
camera.set_perspective_projection(np.radians(60.0), 16 / 9, 0.1, 1000.0)
camera.set_view_target((0.0, 0.0, -5.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
clip = camera.projection @ camera.view @ np.array([0.0, 0.0, 0.0, 1.0])

mesh = StaticMesh(
    vertices=[
        Vertex(position=(0.0, 0.0, 0.0)),
        Vertex(position=(1.0, 0.0, 0.0)),
        Vertex(position=(0.0, 1.0, 0.0)),
    ],
    indices=[0, 1, 2],
)
mesh.build_bvh(16)
stats = mesh.compute_bvh_stats()
print(stats.leaf_count, stats.max_depth)

controller = EditorController(camera=camera)
controller.handle_event(KeyEvent(KeyCode.MOUSE_BU_RIGHT, KeyState.PRESS))
controller.handle_event(KeyEvent(KeyCode.KEY_S, KeyState.PRESS))
controller.update_internal(0.016)
print(camera.position)
```

## What this package does not do

This package contains the logic only. It does not provide:

- a window or a main loop;
- an OpenGL renderer, shader loading or shader hot-reloading;
- a user interface;
- loading or optimising meshes from files.

Events have to be created by the caller and passed to `PlayerController.handle_event`. Matrices, packed vertices and BVH nodes are returned as numpy arrays and bytes for any renderer to use.

## Running the tests

```
pytest
```