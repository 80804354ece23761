import pytest

from framing_model.domain.effects import EntityEffect, EntityEffectTable, EntityKind, RankDirection, RankedEffect
from framing_model.domain.pitch import Handedness, PredictionRow, SurfacePoint, SurfacePrediction
from framing_model.frames import effects_frame, leaderboards_frame, prediction_rows_frame, surface_predictions_frame
from tests.helpers import make_record


class TestFrames:
    def test_prediction_rows_frame(self) -> None:
        rows = [PredictionRow(make_record(catcher_id="c2", outcome=0), 0.25, 0.03)]
        frame = prediction_rows_frame(rows)
        assert frame.loc[0, "catcher_id"] == "c2"
        assert frame.loc[0, "pitcher_throws"] == "R"
        assert frame.loc[0, "fitted_probability"] == 0.25
        assert frame.loc[0, "outcome"] == 0

    def test_surface_predictions_frame(self) -> None:
        points = [SurfacePoint(0.0, 2.5, Handedness.LEFT, "R")]
        frame = surface_predictions_frame(points, [SurfacePrediction(0.9, 0.01)])
        assert list(frame.columns) == [
            "horizontal_location",
            "vertical_location",
            "pitcher_throws",
            "batter_stands",
            "probability",
            "standard_error",
        ]
        assert frame.loc[0, "pitcher_throws"] == "L"
        assert frame.loc[0, "batter_stands"] == "R"

    def test_surface_predictions_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="1 points but 0 predictions"):
            surface_predictions_frame([SurfacePoint(0.0, 2.5, "L", "R")], [])

    def test_effects_frame(self) -> None:
        table = EntityEffectTable(effects=(EntityEffect(EntityKind.UMPIRE, "u1", -0.2, None),))
        frame = effects_frame(table)
        assert frame.loc[0, "kind"] == "umpire"
        assert frame.loc[0, "effect"] == -0.2

    def test_leaderboards_frame(self) -> None:
        boards = {
            (EntityKind.CATCHER, RankDirection.HIGHEST): [RankedEffect(1, "c1", 0.4), RankedEffect(2, "c2", 0.1)],
            (EntityKind.CATCHER, RankDirection.LOWEST): [],
        }
        frame = leaderboards_frame(boards)
        assert frame["rank"].tolist() == [1, 2]
        assert frame["direction"].tolist() == ["highest", "highest"]

    def test_empty_leaderboards_frame_has_columns(self) -> None:
        assert list(leaderboards_frame({}).columns) == ["kind", "direction", "rank", "entity_id", "effect"]
