"""Speech Capture Session

Event-driven state machine between a speech-to-text engine and the command
interpreter. The engine reports result, error and end events; the session
forwards interim transcripts to an optional UI callback and delivers exactly
one final transcript per listening period.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.error_handler import CaptureError
from ..core.logging_manager import LoggingManager


START_FAILURE_MESSAGE = "Failed to start voice recognition. Please try again."


class CaptureState(Enum):
    """Capture session states."""
    IDLE = "idle"
    LISTENING = "listening"


class SpeechEngine(ABC):
    """Speech-to-text engine reporting its events into a CaptureSession."""
    
    @abstractmethod
    def start(self, session: 'CaptureSession') -> None:
        """Begin recognition; events go to the session's handle_* methods."""
        
    @abstractmethod
    def stop(self) -> None:
        """Stop recognition; the engine reports handle_end when done."""


class CaptureSession:
    """One microphone button's worth of recognition state."""
    
    def __init__(self, engine: SpeechEngine,
                 on_final: Callable[[str, int], None],
                 on_interim: Optional[Callable[[str], None]] = None,
                 on_error: Optional[Callable[[CaptureError], None]] = None,
                 continuous: bool = False):
        """Initialize capture session.
        
        Args:
            engine: Speech engine collaborator
            on_final: Receives the final transcript and the sequence number
                of the listening period it belongs to
            on_interim: Optional receiver for interim transcripts
            on_error: Optional receiver for capture failures
            continuous: Engine keeps listening after a final result; the
                session then stops it itself
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.engine = engine
        self.on_final = on_final
        self.on_interim = on_interim
        self.on_error = on_error
        self.continuous = continuous
        
        self.state = CaptureState.IDLE
        self.sequence = 0
        self._delivered = False
        
    @property
    def is_listening(self) -> bool:
        return self.state == CaptureState.LISTENING
    
    def start(self) -> bool:
        """Start a listening period.
        
        Returns:
            True if the engine started; starting while listening is ignored
        """
        if self.is_listening:
            self.logger.debug("Start ignored: already listening")
            return False
        
        self.sequence += 1
        self._delivered = False
        
        try:
            self.engine.start(self)
        except Exception as e:
            self.logger.error(f"Error starting recognition: {e}")
            self._report(CaptureError(START_FAILURE_MESSAGE))
            return False
        
        self.state = CaptureState.LISTENING
        self.logger.debug(f"Listening (sequence {self.sequence})")
        return True
    
    def stop(self) -> None:
        """Ask the engine to stop; the state changes on the end event."""
        if not self.is_listening:
            return
        
        try:
            self.engine.stop()
        except Exception as e:
            self.logger.warning(f"Error stopping recognition: {e}")
            self.state = CaptureState.IDLE
    
    def handle_result(self, results: Sequence[Tuple[str, bool]], result_index: int = 0) -> None:
        """Process a result event from the engine.
        
        Args:
            results: Engine result list of (transcript, is_final) pairs
            result_index: First result that changed in this event
        """
        if not self.is_listening:
            self.logger.debug("Discarding result received while idle")
            return
        
        final_parts: List[str] = []
        interim_parts: List[str] = []
        for transcript, is_final in results[result_index:]:
            (final_parts if is_final else interim_parts).append(transcript)
        
        interim = "".join(interim_parts)
        if interim and self.on_interim:
            self.on_interim(interim)
        
        final = "".join(final_parts)
        if not final or self._delivered:
            return
        
        self._delivered = True
        self.on_final(final, self.sequence)
        
        # Continuous engines never stop on their own
        if self.continuous:
            self.stop()
            self.state = CaptureState.IDLE
    
    def handle_error(self, code: str) -> None:
        """Process an error event; the session returns to idle."""
        self.state = CaptureState.IDLE
        self._report(CaptureError(f"Speech recognition error: {code}"))
    
    def handle_end(self) -> None:
        """Process the engine's end event."""
        self.state = CaptureState.IDLE
        self.logger.debug(f"Recognition ended (sequence {self.sequence})")
        
    def _report(self, error: CaptureError) -> None:
        self.logger.warning(error.message)
        if self.on_error:
            self.on_error(error)
