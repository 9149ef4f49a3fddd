"""Procedural block world: noise terrain, chunk storage, generation, camera, physics, input and visible-face lists."""

__version__ = "0.1.0"