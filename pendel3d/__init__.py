"""Interactive 3D pendulum with a live energy breakdown."""

__version__ = "0.1.0"
