"""SessionStore 单元测试。"""

from persona_quiz import session
from persona_quiz.services.session_store import SessionStore
from persona_quiz.session import Mode, Participant, Phase


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_singleton(store):
    assert SessionStore() is store


def test_unknown_session_is_not_stored(store):
    """测试只读访问不会创建会话。"""
    state = store.get("new")

    assert state.phase is Phase.FORM
    assert len(store) == 0


def test_inert_transition_is_not_stored(store):
    before, after = store.update("new", session.advance)

    assert after is before
    assert len(store) == 0


def test_update_returns_before_and_after(store):
    before, after = store.update("s1", lambda s: session.select_mode(s, Mode.COMPARISON))

    assert before.mode is Mode.INDIVIDUAL
    assert after.mode is Mode.COMPARISON
    assert store.get("s1") is after
    assert len(store) == 1


def test_idle_sessions_are_evicted(store, monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(store, "clock", clock)
    monkeypatch.setattr(store, "ttl_seconds", 60)

    store.update("old", lambda s: session.edit_profile(s, Participant.A, "name", "Alex"))
    clock.now += 30
    store.update("recent", lambda s: session.edit_profile(s, Participant.A, "name", "Sam"))
    clock.now += 45
    store.update("other", lambda s: session.select_mode(s, Mode.COMPARISON))

    assert len(store) == 2
    assert store.get("old").profile_a.name == ""
    assert store.get("recent").profile_a.name == "Sam"


def test_reading_keeps_session_alive(store, monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(store, "clock", clock)
    monkeypatch.setattr(store, "ttl_seconds", 60)

    store.update("s1", lambda s: session.edit_profile(s, Participant.A, "name", "Alex"))
    clock.now += 50
    store.get("s1")
    clock.now += 50
    store.update("s2", lambda s: session.select_mode(s, Mode.COMPARISON))

    assert store.get("s1").profile_a.name == "Alex"
