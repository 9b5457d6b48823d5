"""
Testing in-memory session store and the delayed reveal queue
- A fake clock lets us step past the "thinking" delay without sleeping.
"""

import threading

import pytest

from guessnumber import config
from guessnumber.engine import score
from guessnumber.errors import TurnViolation
from guessnumber.events import SystemGuessed
from guessnumber.reveal import RevealQueue
from guessnumber.session import Phase
from guessnumber.store import SessionStore

class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

def test_reveal_waits_for_delay():
    clock = FakeClock()
    queue = RevealQueue(clock)
    event = SystemGuessed("1234", epoch=1)
    queue.schedule(event, 0.8)

    assert queue.due(1) == []
    assert len(queue) == 1

    clock.now += 1.0
    assert queue.due(1) == [event]
    assert len(queue) == 0

def test_reveal_drops_stale_epoch():
    clock = FakeClock()
    queue = RevealQueue(clock)
    queue.schedule(SystemGuessed("1234", epoch=1), 0.8)

    clock.now += 5
    # session was reset in the meantime (epoch moved on)
    assert queue.due(2) == []
    assert len(queue) == 0

def test_reveal_cancel_all():
    queue = RevealQueue(FakeClock())
    queue.schedule(SystemGuessed("1234", epoch=1), 0.0)
    queue.cancel_all()
    assert queue.due(1) == []

def test_store_create_start_and_play(monkeypatch):
    monkeypatch.setattr(config, "FIRST_GUESS_DELAY", 0.8)
    clock = FakeClock()
    store = SessionStore(secret_factory=lambda: "4321", reveal_clock=clock)

    record = store.create()
    assert store.snapshot(record.id).phase == Phase.IDLE.value

    events, snap = store.start(record.id)
    first_guess = events[0].code
    assert snap.phase == Phase.AWAITING_FEEDBACK.value
    assert snap.current_guess == first_guess
    assert snap.secret == "4321"

    # guess is committed but not visible yet
    assert store.reveal(record.id) == []
    clock.now += 1
    assert store.reveal(record.id) == [SystemGuessed(first_guess, epoch=1)]

    human_secret = "5678" if first_guess != "5678" else "1234"
    _, snap = store.feedback(record.id, *score(human_secret, first_guess))
    assert snap.phase == Phase.AWAITING_PLAYER_GUESS.value
    assert snap.turn == "player"

    events, snap = store.guess(record.id, "4321")
    assert events[-1].kind == "player_won"
    assert snap.outcome == "player_won"

def test_snapshot_does_not_follow_later_changes():
    store = SessionStore(secret_factory=lambda: "4321")
    record = store.create()
    _, snap = store.start(record.id)
    store.reset(record.id)
    assert snap.phase == Phase.AWAITING_FEEDBACK.value
    assert store.snapshot(record.id).phase == Phase.IDLE.value

def test_slow_secret_source_does_not_block_other_sessions():
    entered = threading.Event()
    release = threading.Event()

    def slow_secret():
        entered.set()
        release.wait(5)
        return "4321"

    store = SessionStore(secret_factory=slow_secret)
    a = store.create()
    b = store.create()

    starter = threading.Thread(target=store.start, args=(a.id,))
    starter.start()
    try:
        assert entered.wait(5)
        # a's secret is still being fetched; b must not have to wait for it
        _, snap = store.reset(b.id)
        assert snap.phase == Phase.IDLE.value
        assert not release.is_set()
        assert store.snapshot(a.id).phase == Phase.IDLE.value
    finally:
        release.set()
        starter.join(5)

    assert store.snapshot(a.id).phase == Phase.AWAITING_FEEDBACK.value

def test_store_reset_discards_pending_reveal():
    clock = FakeClock()
    store = SessionStore(secret_factory=lambda: "4321", reveal_clock=clock)
    record = store.create()
    store.start(record.id)

    store.reset(record.id)
    clock.now += 10
    assert store.reveal(record.id) == []

def test_store_propagates_turn_violation():
    store = SessionStore(secret_factory=lambda: "4321")
    record = store.create()
    with pytest.raises(TurnViolation):
        store.guess(record.id, "1234")

def test_store_unknown_session_returns_none():
    store = SessionStore()
    assert store.snapshot("nope") is None
    assert store.start("nope") is None
    assert store.feedback("nope", 0, 0) is None
    assert store.guess("nope", "1234") is None
    assert store.reset("nope") is None
    assert store.reveal("nope") is None
    assert store.discard("nope") is False

def test_store_discard_cancels_pending_reveals():
    store = SessionStore(secret_factory=lambda: "4321")
    record = store.create()
    store.start(record.id)
    assert len(record.reveals) == 1

    assert store.discard(record.id) is True
    assert store.snapshot(record.id) is None
    assert len(record.reveals) == 0

def test_idle_sessions_expire_when_a_new_one_is_created():
    clock = FakeClock()
    store = SessionStore(secret_factory=lambda: "4321", clock=clock, idle_timeout=60)
    old = store.create()
    busy = store.create()

    clock.now += 50
    store.start(busy.id)  # touching a session keeps it alive
    clock.now += 20

    fresh = store.create()
    assert store.snapshot(old.id) is None
    assert store.snapshot(busy.id) is not None
    assert store.snapshot(fresh.id) is not None
