"""End-to-end tests for run_pipeline."""

import pytest

from framing_model.domain.effects import EntityKind, RankDirection
from framing_model.exceptions import FitError
from framing_model.pipeline import PipelineResult, run_pipeline
from framing_model.surface.model import SurfaceHyperparameters
from tests.helpers import make_record, make_zone_records

FAST = SurfaceHyperparameters(lam_min=-1.0, lam_max=2.0, lam_points=4)


@pytest.fixture(scope="module")
def records() -> list:
    return make_zone_records(2500, seed=13)


@pytest.fixture(scope="module")
def result(records: list) -> PipelineResult:
    return run_pipeline(records, sample_size=1500, seed=2, surface_hyperparameters=FAST, top_n=3)


class TestRunPipeline:
    def test_surface_fit_on_subsample(self, result: PipelineResult) -> None:
        assert result.surface.n_samples == 1500
        assert result.surface.seed == 2

    def test_every_record_annotated_in_order(self, result: PipelineResult, records: list) -> None:
        assert len(result.rows) == len(records)
        assert all(row.record is record for row, record in zip(result.rows, records, strict=True))

    def test_effects_cover_every_entity(self, result: PipelineResult, records: list) -> None:
        assert {e.entity_id for e in result.effects.for_kind(EntityKind.CATCHER)} == {r.catcher_id for r in records}
        assert result.effects.n_rows == len(records)

    def test_rankings(self, result: PipelineResult) -> None:
        assert set(result.rankings) == {(k, d) for k in EntityKind for d in RankDirection}
        for ranked in result.rankings.values():
            assert [r.rank for r in ranked] == [1, 2, 3]
        highest = result.rankings[(EntityKind.UMPIRE, RankDirection.HIGHEST)]
        assert highest[0].effect >= highest[-1].effect

    def test_stage_failure_propagates(self) -> None:
        records = [make_record(horizontal_location=0.1 * i, outcome=0) for i in range(30)]
        with pytest.raises(FitError) as exc_info:
            run_pipeline(records)
        assert exc_info.value.stage == "surface"
