import copy

from pcbmill.merge_near_points import merge_near_points, merge_near_points_flagged


def test_nearby_endpoint_is_snapped():
    paths = [[(0.0, 0.0), (1.0, 0.0)], [(1.0001, 0.0), (2.0, 0.0)]]
    assert merge_near_points(paths, 0.001) == 1
    assert paths[1][0] == (1.0, 0.0)
    assert paths[0] == [(0.0, 0.0), (1.0, 0.0)]


def test_far_points_untouched():
    paths = [[(0.0, 0.0), (1.0, 0.0)], [(1.5, 0.0), (2.0, 0.0)]]
    original = copy.deepcopy(paths)
    assert merge_near_points(paths, 0.001) == 0
    assert paths == original


def test_exact_distance_is_merged():
    paths = [[(0.0, 0.0)], [(0.5, 0.0)]]
    assert merge_near_points(paths, 0.5) == 1
    assert paths[1] == [(0.0, 0.0)]


def test_result_points_come_from_input():
    paths = [
        [(0.0, 0.0), (0.01, 0.0), (0.02, 0.01)],
        [(5.0, 5.0), (5.001, 5.0)],
    ]
    originals = {p for ls in paths for p in ls}
    merge_near_points(paths, 0.05)
    assert {p for ls in paths for p in ls} <= originals
    assert [len(ls) for ls in paths] == [3, 2]


def test_flagged_keeps_flags_and_merges():
    paths = [([(0.0, 0.0), (1.0, 0.0)], True), ([(1.0001, 0.0), (2.0, 0.0)], False)]
    assert merge_near_points_flagged(paths, 0.001) == 1
    assert paths[1][0][0] == (1.0, 0.0)
    assert [flag for _, flag in paths] == [True, False]


def test_zero_distance_merges_nothing():
    paths = [[(0.0, 0.0), (0.0, 0.0), (1e-12, 0.0)]]
    assert merge_near_points(paths, 0.0) == 0