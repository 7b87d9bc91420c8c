"""Ray tracing building blocks: geometry, a camera, random generators, console variables and image encoders."""

__version__ = "0.1.0"

__all__ = ["camera", "config", "cvar", "geometry", "imagewrite", "jpeg", "png", "rng"]