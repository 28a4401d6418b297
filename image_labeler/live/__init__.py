"""Throttled classification of live frame streams."""

from .stream import FrameThrottle, classify_frames

__all__ = ["FrameThrottle", "classify_frames"]
