"""SessionState / SessionHub / CallClock 单元测试"""

import pytest
from voicedesk.core.models import MessageRole, ProposedTask, SessionEventType
from voicedesk.session.clock import CallClock, format_duration
from voicedesk.session.hub import SessionHub
from voicedesk.session.state import SessionState


class RecordingPlayback:
    """播放队列替身：记录入队文本"""

    def __init__(self) -> None:
        self.enqueued: list[tuple[str, bytes | None]] = []

    def enqueue(self, text: str, audio: bytes | None = None) -> None:
        self.enqueued.append((text, audio))


@pytest.fixture
def playback() -> RecordingPlayback:
    return RecordingPlayback()


@pytest.fixture
def hub() -> SessionHub:
    return SessionHub()


@pytest.fixture
def state(playback, hub) -> SessionState:
    return SessionState(playback=playback, hub=hub)


def _drain(queue) -> list:
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return events


class TestMessages:
    """对话记录"""

    def test_messages_appended_in_order(self, state):
        state.add_message("one", MessageRole.USER)
        state.add_message("two", MessageRole.ASSISTANT)
        assert [m.content for m in state.messages] == ["one", "two"]

    def test_only_assistant_messages_are_spoken(self, state, playback):
        state.add_message("user words", MessageRole.USER)
        state.add_message("assistant words", MessageRole.ASSISTANT, audio=b"mp3")
        assert playback.enqueued == [("assistant words", b"mp3")]

    def test_user_content_round_trip(self, state):
        content = "  remind me   to call Bob!  "
        state.add_message(content, MessageRole.USER)
        assert state.messages[-1].content == content

    def test_messages_view_is_read_only(self, state):
        state.add_message("one", MessageRole.USER)
        view = state.messages
        assert isinstance(view, tuple)
        state.add_message("two", MessageRole.USER)
        assert len(view) == 1

    def test_message_event_published(self, state, hub):
        queue = hub.subscribe()
        msg = state.add_message("hi", MessageRole.ASSISTANT)
        events = _drain(queue)
        assert events[0].type == SessionEventType.MESSAGE_ADDED
        assert events[0].payload["message"]["id"] == msg.id


class TestProposals:
    def test_set_proposed_tasks_overwrites(self, state):
        state.set_proposed_tasks([ProposedTask(title="a"), ProposedTask(title="b")])
        state.set_proposed_tasks([ProposedTask(title="c")])
        assert [t.title for t in state.proposed_tasks] == ["c"]


class TestCallFlags:
    def test_duration_ticks_only_while_active(self, state):
        state.tick_duration()
        assert state.duration_seconds == 0

        state.set_active(True)
        state.tick_duration()
        state.tick_duration()
        assert state.duration_seconds == 2

        state.reset_duration()
        assert state.call_session().duration_seconds == 0

    def test_flag_events_only_on_change(self, state, hub):
        queue = hub.subscribe()
        state.set_active(True)
        state.set_active(True)
        state.set_listening(True)
        types = [e.type for e in _drain(queue)]
        assert types == [
            SessionEventType.CALL_STATE_CHANGED,
            SessionEventType.LISTENING_CHANGED,
        ]


class TestSessionHub:
    def test_full_queue_dropped(self):
        hub = SessionHub(queue_maxsize=1)
        queue = hub.subscribe()
        hub.publish(SessionEventType.DURATION_TICK, duration_seconds=1)
        hub.publish(SessionEventType.DURATION_TICK, duration_seconds=2)
        assert hub.subscriber_count == 0
        assert queue.qsize() == 1

    def test_unsubscribe(self, hub):
        queue = hub.subscribe()
        hub.unsubscribe(queue)
        hub.publish(SessionEventType.DURATION_TICK)
        assert queue.empty()


class TestCallClock:
    async def test_ticks_once_per_second_until_stopped(self, clock):
        ticks: list[int] = []
        call_clock = CallClock(clock, on_tick=lambda: ticks.append(1))

        call_clock.start()
        await clock.advance(3)
        assert len(ticks) == 3

        call_clock.stop()
        assert call_clock.running is False
        await clock.advance(3)
        assert len(ticks) == 3

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, "00:00"), (59, "00:59"), (61, "01:01"), (3600, "60:00")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected
