import pytest

from conftest import make_wilds
from utils.paylines import aggregate, evaluate
from utils.reveal import PHASE_ALL, PHASE_NONE, PHASE_ONE, RevealSequencer

VISIBLE = 1.0
GAP = 0.5


@pytest.fixture
def two_symbol_aggregate():
    # dog pays on the top row, milu on the middle row
    board = (
        ("dog", "dog", "dog", "a", "k"),
        ("milu", "milu", "milu", "j", "ten"),
        ("bone", "collar", "taxa", "pug", "q"),
    )
    return aggregate(evaluate(board, make_wilds(board), wager=1))


@pytest.fixture
def sequencer(scheduler):
    events = []
    seq = RevealSequencer(scheduler, on_event=events.append, visible_duration=VISIBLE, gap_duration=GAP)
    seq.events = events
    return seq


def phases(events):
    return [(e.phase, e.active_symbol, e.visible) for e in events]


def test_loop_order_and_timing(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    assert phases(sequencer.events) == [(PHASE_ALL, None, True)]

    scheduler.advance(VISIBLE)
    assert phases(sequencer.events)[-1] == (PHASE_ALL, None, False)
    scheduler.advance(GAP)
    assert phases(sequencer.events)[-1] == (PHASE_ONE, "dog", True)
    scheduler.advance(VISIBLE + GAP)
    assert phases(sequencer.events)[-1] == (PHASE_ONE, "milu", True)
    scheduler.advance(VISIBLE + GAP)
    assert phases(sequencer.events)[-1] == (PHASE_ALL, None, True)

    assert phases(sequencer.events) == [
        (PHASE_ALL, None, True),
        (PHASE_ALL, None, False),
        (PHASE_ONE, "dog", True),
        (PHASE_ONE, "dog", False),
        (PHASE_ONE, "milu", True),
        (PHASE_ONE, "milu", False),
        (PHASE_ALL, None, True),
    ]


def test_all_event_carries_round_total_and_first_pass(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    scheduler.advance(3 * (VISIBLE + GAP))
    all_events = [e for e in sequencer.events if e.phase == PHASE_ALL and e.visible]
    assert len(all_events) == 2
    assert all_events[0].is_first_pass is True
    assert all_events[1].is_first_pass is False
    assert all_events[0].round_total == pytest.approx(two_symbol_aggregate.round_total)
    expected_cells = set()
    for cells in two_symbol_aggregate.win_cells_by_symbol.values():
        expected_cells.update(cells)
    assert set(all_events[0].cells) == expected_cells


def test_one_event_carries_symbol_detail(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    scheduler.advance(VISIBLE + GAP)
    event = sequencer.events[-1]
    assert event.phase == PHASE_ONE
    detail = event.detail
    assert detail.symbol == "dog"
    assert detail.count == 3
    assert detail.amount == pytest.approx(2.5)
    assert detail.wild_multipliers == ()
    assert set(detail.cells) == set(two_symbol_aggregate.win_cells_by_symbol["dog"])
    assert event.to_dict()["detail"]["symbol"] == "dog"


def test_replay_counters_only_grow(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    scheduler.advance(6 * (VISIBLE + GAP))
    sequencer.reset()
    sequencer.start(two_symbol_aggregate)
    scheduler.advance(3 * (VISIBLE + GAP))

    all_replays = [e.replay for e in sequencer.events if e.phase == PHASE_ALL and e.visible]
    one_replays = [e.replay for e in sequencer.events if e.phase == PHASE_ONE and e.visible]
    assert all_replays == sorted(set(all_replays))
    assert one_replays == sorted(set(one_replays))
    # A fresh start counts as a first pass again
    firsts = [e.is_first_pass for e in sequencer.events if e.phase == PHASE_ALL and e.visible]
    assert firsts.count(True) == 2


def test_only_one_timer_is_ever_pending(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    for _ in range(40):
        assert scheduler.pending <= 1
        scheduler.advance(0.25)
    sequencer.start(two_symbol_aggregate)
    assert scheduler.pending == 1


def test_reset_emits_none_and_stops(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    sequencer.reset()
    assert phases(sequencer.events)[-1] == (PHASE_NONE, None, False)
    count = len(sequencer.events)
    scheduler.advance(10)
    assert len(sequencer.events) == count
    assert not sequencer.is_running
    assert scheduler.pending == 0


def test_reset_when_idle_is_silent(sequencer):
    sequencer.reset()
    assert sequencer.events == []


def test_cancel_is_silent(sequencer, scheduler, two_symbol_aggregate):
    sequencer.start(two_symbol_aggregate)
    count = len(sequencer.events)
    sequencer.cancel()
    scheduler.advance(10)
    assert len(sequencer.events) == count
    assert sequencer.state.phase == PHASE_NONE


def test_start_without_wins_goes_idle(sequencer, scheduler):
    sequencer.start(aggregate([]))
    assert phases(sequencer.events) == [(PHASE_NONE, None, False)]
    assert scheduler.pending == 0
