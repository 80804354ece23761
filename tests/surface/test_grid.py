import pytest

from framing_model.domain.pitch import Handedness
from framing_model.surface.grid import evaluation_grid


class TestEvaluationGrid:
    def test_covers_every_handedness_pair(self) -> None:
        points = evaluation_grid(step=0.5)
        pairs = {(p.pitcher_throws, p.batter_stands) for p in points}
        assert pairs == {
            (Handedness.LEFT, Handedness.LEFT),
            (Handedness.LEFT, Handedness.RIGHT),
            (Handedness.RIGHT, Handedness.LEFT),
            (Handedness.RIGHT, Handedness.RIGHT),
        }

    def test_includes_both_bounds(self) -> None:
        points = evaluation_grid(horizontal_range=(-1.0, 1.0), vertical_range=(1.0, 2.0), step=0.5)
        xs = sorted({p.horizontal_location for p in points})
        zs = sorted({p.vertical_location for p in points})
        assert xs == [-1.0, -0.5, 0.0, 0.5, 1.0]
        assert zs == [1.0, 1.5, 2.0]
        assert len(points) == 4 * 5 * 3

    def test_default_size(self) -> None:
        points = evaluation_grid()
        assert len(points) == 4 * 81 * 101

    def test_single_pair(self) -> None:
        points = evaluation_grid(step=1.0, handedness_pairs=[(Handedness.RIGHT, Handedness.LEFT)])
        assert {(p.pitcher_throws, p.batter_stands) for p in points} == {(Handedness.RIGHT, Handedness.LEFT)}

    def test_non_positive_step_raises(self) -> None:
        with pytest.raises(ValueError, match="step"):
            evaluation_grid(step=0.0)

    def test_reversed_bounds_raise(self) -> None:
        with pytest.raises(ValueError, match="increasing"):
            evaluation_grid(horizontal_range=(1.0, -1.0))
