import pytest

from gameplan.encoding import position_to_int
from gameplan.game_basics import CellState, Position
from gameplan.tree import PositionTree, PositionTreeBuilder, get_recommended_moves, recommended_move_for

X_WIN = Position.from_string("222110000")
O_WIN = Position.from_string("111220200")
DRAW = Position.from_string("212211122")


def leaf(position):
    return PositionTree(position, CellState.CIRCLE, {})


def test_leaf_scores_outcome_and_has_no_recommendation():
    assert leaf(X_WIN).score == 1.0
    assert leaf(O_WIN).score == -1.0
    d = leaf(DRAW)
    assert d.score == 0.0
    assert d.is_terminal
    assert d.recommended_move is None


def test_internal_score_is_mean_not_minimax():
    children = {0: leaf(X_WIN), 1: leaf(DRAW), 2: leaf(O_WIN), 3: leaf(X_WIN)}
    node = PositionTree(Position(), CellState.CROSS, children)
    assert node.score == pytest.approx(0.25)
    assert node.recommended_move is None
    assert not node.is_terminal


def test_circle_picks_lowest_mean_child():
    children = {3: leaf(DRAW), 5: leaf(O_WIN), 7: leaf(X_WIN)}
    node = PositionTree(Position(), CellState.CIRCLE, children)
    assert node.recommended_move == 5
    assert node.score == pytest.approx(0.0)


def test_ties_go_to_lowest_cell_index():
    children = {7: leaf(O_WIN), 2: leaf(O_WIN), 4: leaf(DRAW)}
    node = PositionTree(Position(), CellState.CIRCLE, children)
    assert node.recommended_move == 2


def test_table_size_matches_reachable_circle_boards(built):
    builder, moves = built
    # non-terminal boards with Circle to move, by ply: 9 + 252 + 1140 + 696
    assert len(moves) == 2097
    # every legal-game board, terminal or not
    assert len(builder.cache) == 5478


def test_table_only_holds_open_circle_to_move_boards(built):
    builder, moves = built
    for key, move in moves.items():
        node = builder.cache[key]
        assert node.who_moves == CellState.CIRCLE
        assert not node.is_terminal
        assert node.position[move] == CellState.EMPTY
        assert move in node.children
    for key, node in builder.cache.items():
        if node.who_moves == CellState.CIRCLE and not node.is_terminal:
            assert key in moves
        else:
            assert key not in moves


def test_keys_match_cached_positions(built):
    builder, _ = built
    for key, node in builder.cache.items():
        assert position_to_int(node.position) == key


def test_scores_are_means_of_children(built):
    builder, _ = built
    for node in builder.cache.values():
        assert -1.0 <= node.score <= 1.0
        if node.children:
            values = [c.score for c in node.children.values()]
            assert node.score == sum(values) / len(values)
            assert sorted(node.children) == node.position.empty_cells()


def test_transpositions_share_one_node(built):
    builder, _ = built
    via_0_first = builder.cache[position_to_int(Position.from_string("200000000"))]
    via_2_first = builder.cache[position_to_int(Position.from_string("002000000"))]
    a = via_0_first.children[1].children[2]
    b = via_2_first.children[1].children[0]
    assert a is b
    assert a.position.serialize() == "212000000"
    assert builder.stats["hits"] > 0
    assert builder.stats["misses"] == len(builder.cache)


def test_immediate_circle_win_is_recommended(built):
    builder, moves = built
    # O O . / X X . / X . .  Circle to move; cell 2 wins at once
    p = Position.from_string("110220200")
    key = position_to_int(p)
    assert moves[key] == 2
    assert builder.cache[key].children[2].score == -1.0


def test_reply_to_corner_opening(built):
    builder, moves = built
    node = builder.cache[position_to_int(Position().move(0, CellState.CROSS))]
    assert node.who_moves == CellState.CIRCLE
    assert sorted(node.children) == list(range(1, 9))
    expected = {1: 16 / 35, 2: 10 / 35, 3: 16 / 35, 4: 4 / 35,
                5: 15 / 35, 6: 10 / 35, 7: 15 / 35, 8: 10 / 35}
    for cell, score in expected.items():
        assert node.children[cell].score == pytest.approx(score)
    assert node.recommended_move == moves[2] == 4


def test_reply_to_center_opening(built):
    builder, moves = built
    key = position_to_int(Position().move(4, CellState.CROSS))
    assert key == 162
    assert builder.cache[key].who_moves == CellState.CIRCLE
    assert moves[162] == 0


def test_cross_to_move_and_terminal_boards_have_no_entry(built):
    _, moves = built
    assert 0 not in moves  # empty board, Cross to move
    assert position_to_int(Position.from_string("210000000")) not in moves
    # Cross already won, Circle would be to move
    assert position_to_int(Position.from_string("222110000")) not in moves


def test_recommendations_are_deterministic(built):
    _, moves = built
    assert get_recommended_moves() == moves
    assert PositionTreeBuilder().get_recommended_moves() == get_recommended_moves()


def test_recommended_move_for_single_board(built):
    _, moves = built
    assert recommended_move_for(Position.from_string("200000000")) == moves[2]
    assert recommended_move_for(Position()) is None
    # prebuilt table is used as given
    assert recommended_move_for(Position.from_string("200000000"), moves) == 4
    assert recommended_move_for(Position.from_string("200000000"), {2: 7}) == 7


def test_build_from_arbitrary_start():
    builder = PositionTreeBuilder()
    p = Position.from_string("212211120")
    node = builder.build_tree(p, CellState.CROSS)
    # only cell 8 is left; X there makes X O X / X O O / O X X, a draw
    assert list(node.children) == [8]
    assert node.score == 0.0
    assert len(builder.cache) == 2


def test_terminal_circle_to_move_boards_are_left_out(built):
    builder, moves = built
    terminal = [key for key, node in builder.nodes_to_move(CellState.CIRCLE) if node.is_terminal]
    # Cross wins after moves 5 and 7 (120 + 444) plus 78 full boards
    assert len(terminal) == 642
    assert not set(terminal) & set(moves)
