"""Tests for tracking.tracker and tracking.api.

Covers the per-subject orchestrator end to end:
    - state machine (uninitialized, first sample, reset)
    - Scenario A (clockwise loop around D) and Scenario B (conjugated loop)
    - cancellation round trip, no-crossing idempotence, atomic failures
    - simplification safety and determinism on seeded random walks
    - closed-loop words, transactional multi-sample updates, batch helpers
"""

import logging

import pytest

from algebra.letters import Letter, Word, cancels
from conftest import random_walk
from geometry.api import build_registry
from geometry.crossings import CrossingDetector
from geometry.detour import detour
from tracking.api import polyline_word, replay
from tracking.config import build_config
from tracking.errors import DegenerateCrossing, TrackerNotInitialized
from tracking.tracker import PathTracker

SCENARIO_A = [(0.0, 0.0), (0.0, 4.0), (4.0, 4.0), (4.0, 0.0), (0.0, 0.0)]

# basepoint between C and D: under C leftwards, over both, back under D,
# over C again, then under C rightwards to the start
SCENARIO_B = [
    (4.0, 0.0), (0.0, 0.0), (0.0, 4.0), (8.0, 4.0), (8.0, 0.0),
    (4.0, 0.0), (4.0, 4.0), (0.0, 4.0), (0.0, 0.0), (4.0, 0.0),
]


def _track(registry, samples, **cfg):
    tracker = PathTracker(registry, config=build_config(cfg) if cfg else None)
    for p in samples:
        tracker.update(p)
    return tracker


def _accepted_walk(tracker, samples):
    """Feed samples, skipping rejected ones; return the accepted raw positions."""
    accepted = []
    for p in samples:
        try:
            tracker.update(p)
        except DegenerateCrossing:
            continue
        if not accepted or tracker.last_position != accepted[-1]:
            accepted.append(tracker.last_position)
    return accepted


class TestStateMachine:
    """Uninitialized -> Tracking -> reset."""

    def test_uninitialized(self, single_d):
        tracker = PathTracker(single_d)
        assert not tracker.is_initialized
        assert tracker.current_word().is_identity()
        assert tracker.loop_word().is_identity()
        with pytest.raises(TrackerNotInitialized):
            tracker.current_path()

    def test_first_sample_is_basepoint(self, single_d):
        tracker = PathTracker(single_d)
        assert tracker.update((0.0, 0.0)) == []
        assert tracker.is_initialized
        assert tracker.current_path().vertices == ((0.0, 0.0),)
        assert tracker.basepoint == (0.0, 0.0)

    def test_basepoint_argument(self, single_d):
        tracker = PathTracker(single_d, basepoint=(1.0, 1.0))
        assert tracker.last_position == (1.0, 1.0)

    def test_first_sample_on_ray(self, single_d):
        """A basepoint on a ray is rejected and the tracker stays uninitialized."""
        tracker = PathTracker(single_d)
        with pytest.raises(DegenerateCrossing):
            tracker.update((2.0, -1.0))
        assert not tracker.is_initialized

    def test_reset(self, single_d):
        """After reset(p) the word is empty and the path is exactly [p]."""
        tracker = _track(single_d, SCENARIO_A)
        tracker.reset((9.0, 9.0))
        assert tracker.current_word().is_identity()
        assert tracker.current_path().vertices == ((9.0, 9.0),)
        assert tracker.last_position == (9.0, 9.0)
        tracker.update((9.0, 1.0))
        assert tracker.current_path().basepoint == (9.0, 9.0)

    def test_reset_on_ray_keeps_state(self, single_d):
        tracker = _track(single_d, SCENARIO_A)
        with pytest.raises(DegenerateCrossing):
            tracker.reset((2.0, 0.0))
        assert tracker.current_word().symbols() == ["d"]

    def test_bad_sample(self, single_d):
        tracker = PathTracker(single_d, basepoint=(0.0, 0.0))
        with pytest.raises(ValueError):
            tracker.update((float("inf"), 0.0))


class TestScenarios:
    """Worked examples."""

    def test_scenario_a(self, single_d):
        """One clockwise loop around D yields ['d']."""
        tracker = _track(single_d, SCENARIO_A)
        assert tracker.current_word().symbols() == ["d"]
        assert tracker.current_word().to_pairs() == [("D", "CW")]

    def test_scenario_a_counter_clockwise(self, single_d):
        tracker = _track(single_d, SCENARIO_A[::-1])
        assert tracker.current_word().symbols() == ["D"]

    def test_scenario_b(self, c_and_d):
        """The loop around D conjugated by a pass under C yields ['c', 'd', 'C']."""
        tracker = _track(c_and_d, SCENARIO_B)
        word = tracker.current_word()
        assert word.symbols() == ["c", "d", "C"]
        # freely homotopic to the plain loop around D
        assert word.cyclically_reduced().symbols() == ["d"]
        assert word != _track(c_and_d, [(4.0, 0.0), (4.0, 4.0), (8.0, 4.0),
                                        (8.0, 0.0), (4.0, 0.0)]).current_word()

    def test_double_loop(self, single_d):
        """Winding twice repeats the letter."""
        tracker = _track(single_d, SCENARIO_A + SCENARIO_A[1:])
        assert str(tracker.current_word()) == "dd"

    def test_loop_then_unwind(self, single_d):
        """Going around and back the same way unwinds to the identity."""
        tracker = _track(single_d, SCENARIO_A + SCENARIO_A[::-1][1:])
        assert tracker.current_word().is_identity()


class TestProperties:
    """Invariants of every reachable state."""

    def test_cancellation_round_trip(self, single_d):
        """Crossing a ray and reversing the step restores the previous word."""
        tracker = _track(single_d, SCENARIO_A)
        before = tracker.current_word()
        tracker.update((0.0, -1.0))
        tracker.update((4.0, -1.0))
        assert tracker.current_word() != before
        tracker.update((0.0, -1.0))
        assert tracker.current_word() == before

    def test_no_crossing_idempotence(self, single_d):
        """Steps that cross nothing leave the word alone and only touch the tail."""
        tracker = PathTracker(single_d, basepoint=(0.0, 0.0))
        for p in [(0.0, 1.0), (0.0, 3.0), (1.0, 5.0), (3.0, 5.0), (5.0, 5.0), (5.0, 3.0)]:
            prev = tracker.current_path().vertices
            events = tracker.update(p)
            after = tracker.current_path().vertices
            assert events == []
            assert tracker.current_word().is_identity()
            assert len(after) in (len(prev), len(prev) + 1)
            assert after[:len(prev) - 1] == prev[:len(prev) - 1]
            if len(after) == len(prev) + 1:
                assert after[:-1] == prev

    def test_atomic_failure(self, single_d):
        """A rejected update leaves word, path and last position unchanged."""
        tracker = _track(single_d, [(0.0, 0.0), (4.0, 0.0)])
        word, path, last = tracker.current_word(), tracker.current_path(), tracker.last_position
        with pytest.raises(DegenerateCrossing):
            tracker.update((2.0, 2.0))
        assert tracker.current_word() == word
        assert tracker.current_path() == path
        assert tracker.last_position == last
        # retry with a corrected sample
        tracker.update((2.0, 2.5))
        assert tracker.last_position == (2.0, 2.5)

    def test_update_does_not_rebuild_word(self, single_d, caplog, monkeypatch):
        """Crossing updates log the word length without materializing the word."""
        caplog.set_level(logging.DEBUG, logger="tracking.tracker")
        tracker = PathTracker(single_d, basepoint=(0.0, 0.0))
        monkeypatch.setattr(tracker._reducer, "current",
                            lambda: pytest.fail("word rebuilt during update"))
        tracker.update((4.0, 0.0))
        assert len(tracker._reducer) == 1
        assert "word length 1" in caplog.text

    def test_micro_movement_ignored(self, single_d):
        tracker = PathTracker(single_d, basepoint=(0.0, 0.0))
        assert tracker.update((1e-12, 0.0)) == []
        assert tracker.last_position == (0.0, 0.0)
        assert len(tracker.current_path()) == 1

    def test_freeness_and_simplification_safety(self, three_punctures, rng):
        """Raw and simplified polylines produce identical letters; words stay reduced."""
        samples = random_walk(rng, 200)
        tracker = PathTracker(three_punctures)
        accepted = _accepted_walk(tracker, samples)

        word = tracker.current_word()
        assert not any(cancels(x, y) for x, y in zip(word, list(word)[1:]))

        det = CrossingDetector(three_punctures.snapshot())
        raw_letters = det.polyline_letters(accepted)
        path = tracker.current_path()
        assert det.polyline_letters(path.vertices) == raw_letters
        assert Word.reduce(Letter(i, s) for i, s in raw_letters) == word
        assert len(path) < len(accepted)

    def test_determinism_across_registration_order(self, rng):
        """Same geometry registered in another order gives the same word and path."""
        defs = [("A", (-1.3, 0.7)), ("B", (1.1, -0.4)), ("C", (0.2, 1.9))]
        samples = random_walk(rng, 120)
        first = PathTracker(build_registry(defs))
        second = PathTracker(build_registry(defs[::-1]))
        _accepted_walk(first, samples)
        _accepted_walk(second, samples)
        assert str(first.current_word()) == str(second.current_word())
        assert first.current_path() == second.current_path()

    def test_determinism_with_simultaneous_crossings(self):
        """Stacked punctures crossed at the same instant give one word in either order."""
        defs = [("A", (2.0, 2.0)), ("B", (2.0, 5.0))]
        samples = [(0.0, 0.0), (4.0, 0.0), (4.0, 7.0), (0.0, 7.0), (0.0, 3.5), (4.0, 3.5)]
        words = [
            str(_track(build_registry(order), samples).current_word())
            for order in (defs, defs[::-1])
        ]
        assert words == ["ABB", "ABB"]
        paths = [
            _track(build_registry(order), samples).current_path()
            for order in (defs, defs[::-1])
        ]
        assert paths[0] == paths[1]

    def test_registry_change_puts_last_position_on_ray(self, single_d):
        """A new ray through the last position blocks updates until reset."""
        tracker = _track(single_d, [(0.0, 0.0), (0.0, 3.0)])
        single_d.register("E", (0.0, 5.0))
        with pytest.raises(DegenerateCrossing) as info:
            tracker.update((1.0, 3.0))
        assert info.value.puncture_id == 1
        assert tracker.last_position == (0.0, 3.0)
        assert tracker.current_path().vertices == ((0.0, 0.0), (0.0, 3.0))
        tracker.reset((1.0, 1.0))
        tracker.update((1.0, 4.0))
        assert tracker.current_word().is_identity()

    def test_registry_change_between_sessions(self, single_d):
        """A puncture added between sessions is seen after the next update."""
        tracker = _track(single_d, [(0.0, 0.0), (0.0, 3.0)])
        single_d.register("E", (6.0, 2.0))
        tracker.reset((0.0, 0.0))
        tracker.update((8.0, 0.0))
        assert str(tracker.current_word()) == "DE"


class TestLoopWord:
    """Closed-loop word via the straight return to the basepoint."""

    def test_open_path_closed_by_return(self, single_d):
        tracker = _track(single_d, SCENARIO_A[:-1])
        assert tracker.current_word().is_identity()
        assert tracker.loop_word().symbols() == ["d"]

    def test_return_cancels(self, single_d):
        tracker = _track(single_d, [(0.0, 0.0), (4.0, 0.0)])
        assert tracker.current_word().symbols() == ["D"]
        assert tracker.loop_word().is_identity()

    def test_closed_path(self, single_d):
        tracker = _track(single_d, SCENARIO_A)
        assert tracker.loop_word() == tracker.current_word()

    def test_return_through_puncture(self, single_d):
        tracker = _track(single_d, [(0.0, 2.0), (2.0, 3.0), (4.0, 2.0)])
        with pytest.raises(DegenerateCrossing):
            tracker.loop_word()


class TestUpdateAlong:
    """Transactional multi-sample updates."""

    def test_rollback_on_failure(self, single_d):
        tracker = PathTracker(single_d, basepoint=(0.0, 0.0))
        with pytest.raises(DegenerateCrossing):
            tracker.update_along([(4.0, 0.0), (2.0, 2.0)])
        assert tracker.current_word().is_identity()
        assert tracker.current_path().vertices == ((0.0, 0.0),)
        assert tracker.last_position == (0.0, 0.0)

    def test_rollback_to_uninitialized(self, single_d):
        tracker = PathTracker(single_d)
        with pytest.raises(DegenerateCrossing):
            tracker.update_along([(0.0, 0.0), (2.0, 0.0)])
        assert not tracker.is_initialized

    def test_detour_route(self, single_d):
        """A blocked straight move re-routed over D crosses nothing."""
        tracker = PathTracker(single_d, basepoint=(0.0, 2.0))
        with pytest.raises(DegenerateCrossing):
            tracker.update((4.0, 2.0))
        route = detour((0.0, 2.0), (4.0, 2.0), single_d.snapshot())
        tracker.update_along(route[1:])
        assert tracker.last_position == (4.0, 2.0)
        assert tracker.current_word().is_identity()


class TestBatchApi:
    """tracking.api helpers."""

    def test_polyline_word_closes_loop(self, single_d):
        assert polyline_word(SCENARIO_A[:-1], single_d).symbols() == ["d"]
        assert polyline_word(SCENARIO_A[:-1], single_d, closed=False).is_identity()

    def test_polyline_word_matches_tracker(self, c_and_d):
        assert polyline_word(SCENARIO_B, c_and_d) == _track(c_and_d, SCENARIO_B).current_word()

    def test_polyline_word_degenerate_input(self, single_d):
        assert polyline_word([(0.0, 0.0)], single_d).is_identity()

    def test_replay(self, c_and_d):
        tracker = replay(SCENARIO_B, c_and_d)
        assert str(tracker.current_word()) == "cdC"
