from sniper.analytics.patterns import leading_streak, block_repeats, alternates, shape_score, runs
from sniper.core.types import Outcome


def H(s):
    return [Outcome(c) for c in s]


def test_leading_streak():
    assert leading_streak(H("PPPB")) == 3
    assert leading_streak(H("B")) == 1
    assert leading_streak([]) == 0


def test_block_repeats():
    assert block_repeats(H("PPBPPB"), 3)
    assert not block_repeats(H("PPBPPP"), 3)
    assert not block_repeats(H("PPBPP"), 3)


def test_alternates():
    assert alternates(H("PBP"))
    assert alternates(H("BPBB"))
    assert not alternates(H("PBB"))
    assert not alternates(H("PB"))


def test_shape_score_tiles():
    assert shape_score(H("BBPPBBPP"), "XXYY") == 2
    # tiles BBP | PBB | PP -> only the first is a 2-1 block
    assert shape_score(H("BBPPBBPP"), "XXY") == 1
    assert shape_score(H("BBPBBPBBP"), "XXY") == 3
    assert shape_score(H("PBBPP"), "XXYY", start=1) == 1


def test_shape_score_window():
    assert shape_score(H("BBPP" * 10), "XXYY", window=8) == 2


def test_runs():
    assert runs(H("PPPBB"), k=3) == [(0, 2, 'P', 3)]
    assert runs(H("PBBBB"), k=3) == [(1, 4, 'B', 4)]
