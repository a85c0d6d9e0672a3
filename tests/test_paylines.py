import pytest

from conftest import make_board, make_wilds
from utils.game_config import DEFAULT_WEIGHTS, PAYLINES, WILD
from utils.game_utils import BoardGenerator
from utils.paylines import aggregate, evaluate, evaluate_line, summarize

MIDDLE_LINE = 1


def test_five_of_a_kind_on_one_line(dog_line_board):
    board, wilds = dog_line_board
    wins = evaluate(board, wilds, wager=10)
    assert len(wins) == 1
    win = wins[0]
    assert win.line_index == MIDDLE_LINE
    assert win.symbol == "dog"
    assert win.count == 5
    assert win.amount == pytest.approx(375.0)
    assert win.wild_factor == 1
    assert win.cells == ((1, 0), (1, 1), (1, 2), (1, 3), (1, 4))


def test_leading_wild_takes_next_symbol_and_multiplies():
    board = make_board([WILD, "dog", "dog", "a", "k"])
    wilds = make_wilds(board, {(1, 0): 3})
    wins = evaluate(board, wilds, wager=1)
    assert len(wins) == 1
    win = wins[0]
    assert win.symbol == "dog"
    assert win.count == 3
    assert win.base_amount == pytest.approx(2.5)
    assert win.wild_multipliers == (3,)
    assert win.wild_factor == 3
    assert win.amount == pytest.approx(7.5)


def test_wild_multipliers_are_summed():
    board = make_board(["dog", WILD, WILD, "dog", "a"])
    wilds = make_wilds(board, {(1, 1): 2, (1, 2): 3})
    win = evaluate_line(MIDDLE_LINE, PAYLINES[MIDDLE_LINE], board, wilds, {"dog": {4: 7.5}}, 1)
    assert win.count == 4
    assert win.wild_multipliers == (2, 3)
    assert win.wild_factor == 5
    assert win.amount == pytest.approx(37.5)


def test_all_wild_line_never_pays():
    board = make_board([WILD] * 5)
    wilds = make_wilds(board)
    assert evaluate_line(MIDDLE_LINE, PAYLINES[MIDDLE_LINE], board, wilds, {"dog": {5: 37.5}}, 1) is None


def test_run_stops_at_first_breaker():
    board = make_board(["dog", "dog", "dog", "a", "dog"])
    win = evaluate_line(MIDDLE_LINE, PAYLINES[MIDDLE_LINE], board, make_wilds(board),
                        {"dog": {5: 37.5, 4: 7.5, 3: 2.5}}, 1)
    assert win.count == 3
    assert win.amount == pytest.approx(2.5)


def test_short_run_does_not_pay():
    board = make_board(["dog", "dog", "a", "dog", "dog"])
    assert evaluate_line(MIDDLE_LINE, PAYLINES[MIDDLE_LINE], board, make_wilds(board),
                         {"dog": {3: 2.5}}, 1) is None


def test_missing_tier_is_not_rounded_down():
    board = make_board(["dog", "dog", "dog", "dog", "a"])
    table = {"dog": {5: 37.5, 3: 2.5}}
    assert evaluate_line(MIDDLE_LINE, PAYLINES[MIDDLE_LINE], board, make_wilds(board), table, 1) is None


def test_symbol_without_payout_entry_does_not_pay():
    board = make_board(["dog"] * 5)
    assert evaluate(board, make_wilds(board), payout_table={"milu": {5: 25.0}}) == []


def test_evaluation_is_repeatable(dog_line_board):
    board, wilds = dog_line_board
    assert evaluate(board, wilds, wager=2) == evaluate(board, wilds, wager=2)


def test_overlapping_lines_all_pay():
    board = make_board(["dog"] * 5, top=["dog", "dog", "dog", "j", "ten"])
    wins = evaluate(board, make_wilds(board), wager=1)
    by_line = {win.line_index: win for win in wins}
    # Middle row and the (1, 1, 0, 1, 1) line share four cells and both pay in full.
    assert by_line[1].count == 5
    assert by_line[15].count == 5
    assert set(by_line[1].cells) & set(by_line[15].cells) == {(1, 0), (1, 1), (1, 3), (1, 4)}
    assert by_line[0].count == 3
    assert by_line[0].amount == pytest.approx(2.5)
    assert all(win.symbol == "dog" for win in wins)


def test_aggregate_groups_by_symbol():
    board = (("dog",) * 5, ("milu",) * 5, ("pug",) * 5)
    wins = evaluate(board, make_wilds(board), wager=1)
    agg = aggregate(wins)
    assert agg.has_wins
    assert agg.ordered_symbol_keys == tuple(sorted({w.symbol for w in wins}))
    assert agg.round_total == pytest.approx(sum(w.amount for w in wins))
    for symbol, cells in agg.win_cells_by_symbol.items():
        expected = set()
        for win in wins:
            if win.symbol == symbol:
                expected.update(win.cells)
        assert cells == frozenset(expected)
        best = agg.best_win_by_symbol[symbol]
        assert best.amount == max(w.amount for w in wins if w.symbol == symbol)


def test_aggregate_of_nothing():
    agg = aggregate([])
    assert not agg.has_wins
    assert agg.round_total == 0
    assert agg.ordered_symbol_keys == ()
    assert summarize(agg).total == 0
    assert summarize(agg).items == ()


def test_summary_items_cover_every_line_biggest_first():
    board = make_board(["dog", "dog", "dog", "a", "k"], top=["milu", "milu", "milu", "j", "ten"])
    wins = evaluate(board, make_wilds(board), wager=1)
    summary = summarize(aggregate(wins))
    assert len(summary.items) == len(wins)
    amounts = [item["amount"] for item in summary.items]
    assert amounts == sorted(amounts, reverse=True)
    assert summary.total == pytest.approx(sum(amounts))
    assert summary.best == summary.items[0]
    assert summary.to_dict()["items"][0]["symbol"] == summary.items[0]["symbol"]


def test_round_total_is_exact_sum_of_line_amounts(rng):
    generator = BoardGenerator(rng)
    weights = dict(DEFAULT_WEIGHTS, **{WILD: 6})
    for _ in range(300):
        board, wilds = generator.generate(weights)
        wins = evaluate(board, wilds, wager=0.4)
        summary = summarize(aggregate(wins))
        assert summary.total == sum(win.amount for win in wins)
        assert sum(item["amount"] for item in summary.items) == pytest.approx(summary.total)
