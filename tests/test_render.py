import json

from gameplan.render import render_js, render_json, table_rows


def test_render_js_sorted_keys():
    assert render_js({5: 4, 2: 0}) == "function getMoves() { return {2:0,5:4,};}"
    assert render_js({}) == "function getMoves() { return {};}"


def test_render_json_round_trips_keys_as_strings():
    data = json.loads(render_json({11: 3, 2: 4}))
    assert data == {"2": 4, "11": 3}
    assert list(data) == ["2", "11"]


def test_table_rows_cover_the_table(built):
    builder, moves = built
    rows = table_rows(builder)
    assert len(rows) == len(moves)
    assert [r['key'] for r in rows] == sorted(moves)
    for r in rows[:50]:
        assert moves[r['key']] == r['recommended_move']
        assert len(r['board_state']) == 9
        assert r['score'] == builder.cache[r['key']].score
