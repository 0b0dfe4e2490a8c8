"""
Unit tests for the speech CaptureSession state machine.
"""

import pytest

from clockvoice.capture.session import START_FAILURE_MESSAGE, CaptureSession, CaptureState
from clockvoice.core.error_handler import CaptureError
from tests.fixtures.stubs import FakeSpeechEngine


class Recorder:
    """Collects session callbacks"""

    def __init__(self):
        self.finals = []
        self.interims = []
        self.errors = []

    def session(self, engine, continuous=False):
        return CaptureSession(
            engine,
            on_final=lambda text, sequence: self.finals.append((text, sequence)),
            on_interim=self.interims.append,
            on_error=self.errors.append,
            continuous=continuous
        )


class TestCaptureSession:
    """Test suite for CaptureSession"""

    @pytest.fixture
    def recorder(self):
        return Recorder()

    @pytest.mark.unit
    def test_start_listens(self, recorder, speech_engine):
        session = recorder.session(speech_engine)

        assert session.state == CaptureState.IDLE
        assert session.start()
        assert session.is_listening
        assert session.sequence == 1
        assert speech_engine.started == 1

    @pytest.mark.unit
    def test_start_while_listening_ignored(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        assert not session.start()
        assert speech_engine.started == 1
        assert session.sequence == 1

    @pytest.mark.unit
    def test_interim_then_final(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        session.handle_result([("add sara", False)])
        session.handle_result([("add sara on december 15", True), (" at 9", False)])

        assert recorder.interims == ["add sara", " at 9"]
        assert recorder.finals == [("add sara on december 15", 1)]

    @pytest.mark.unit
    def test_final_parts_joined_from_result_index(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        results = [("stale", True), ("delete row 3", True), (" carmen", True)]
        session.handle_result(results, result_index=1)

        assert recorder.finals == [("delete row 3 carmen", 1)]

    @pytest.mark.unit
    def test_single_delivery_per_period(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        session.handle_result([("first", True)])
        session.handle_result([("second", True)])

        assert recorder.finals == [("first", 1)]

    @pytest.mark.unit
    def test_continuous_engine_stopped_after_final(self, recorder, speech_engine):
        session = recorder.session(speech_engine, continuous=True)
        session.start()

        session.handle_result([("add bob", True)])

        assert speech_engine.stopped == 1
        assert session.state == CaptureState.IDLE

    @pytest.mark.unit
    def test_continuous_engine_without_end_event(self, recorder):
        """A continuous engine that never reports its end still leaves the session idle"""
        engine = FakeSpeechEngine(ends_on_stop=False)
        session = recorder.session(engine, continuous=True)
        session.start()

        session.handle_result([("add bob", True)])

        assert engine.stopped == 1
        assert session.state == CaptureState.IDLE

        session.handle_result([("delete row 2", True)])
        assert recorder.finals == [("add bob", 1)]

        assert session.start()
        assert session.sequence == 2

    @pytest.mark.unit
    def test_non_continuous_engine_ends_itself(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        session.handle_result([("add bob", True)])
        assert speech_engine.stopped == 0
        assert session.is_listening

        session.handle_end()
        assert session.state == CaptureState.IDLE

    @pytest.mark.unit
    def test_results_while_idle_discarded(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.handle_result([("late", True)])
        assert recorder.finals == []

    @pytest.mark.unit
    def test_new_period_gets_new_sequence(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()
        session.handle_result([("first", True)])
        session.stop()

        session.start()
        session.handle_result([("second", True)])

        assert recorder.finals == [("first", 1), ("second", 2)]

    @pytest.mark.unit
    def test_engine_error(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.start()

        session.handle_error("no-speech")

        assert session.state == CaptureState.IDLE
        assert len(recorder.errors) == 1
        assert isinstance(recorder.errors[0], CaptureError)
        assert recorder.errors[0].message == "Speech recognition error: no-speech"

    @pytest.mark.unit
    def test_start_failure(self, recorder):
        session = recorder.session(FakeSpeechEngine(fail_on_start=True))

        assert not session.start()
        assert session.state == CaptureState.IDLE
        assert recorder.errors[0].message == START_FAILURE_MESSAGE
        assert START_FAILURE_MESSAGE == "Failed to start voice recognition. Please try again."

    @pytest.mark.unit
    def test_stop_when_idle_is_noop(self, recorder, speech_engine):
        session = recorder.session(speech_engine)
        session.stop()
        assert speech_engine.stopped == 0

    @pytest.mark.unit
    def test_callbacks_optional(self, speech_engine):
        finals = []
        session = CaptureSession(speech_engine, on_final=lambda text, sequence: finals.append(text))
        session.start()

        session.handle_result([("add", False)])
        session.handle_error("network")

        assert finals == []
