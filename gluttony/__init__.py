"""Events, camera math, transforms, BVH construction and input handling for a small ray-tracing renderer."""

__version__ = "0.1.0"

__all__ = ["camera", "components", "editor", "events", "mesh", "player_controller"]