"""Speech capture boundary."""

from .session import CaptureSession, CaptureState, SpeechEngine

__all__ = ["CaptureSession", "CaptureState", "SpeechEngine"]
