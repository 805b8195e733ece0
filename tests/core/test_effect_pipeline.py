"""core.pipeline の固定順・上書き引数・ウォームアップのテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from mojibench.core.pipeline import (
    DEFAULT_EFFECT_ORDER,
    EffectPipeline,
    EffectStep,
    default_pipeline,
    warm_up,
)
from mojibench.core.raster import Stamp, blank_canvas
from mojibench.core.render import render_cell


def test_default_pipeline_uses_fixed_order() -> None:
    pipeline = default_pipeline()
    assert pipeline.names == DEFAULT_EFFECT_ORDER
    assert pipeline.names == ("glow", "extrusion", "rotation", "sparkle", "surreal", "colorful")
    assert all(step.args == () for step in pipeline.steps)


def test_overrides_are_normalized_in_param_order() -> None:
    pipeline = default_pipeline({"glow": {"intensity": 0.5, "radius": 2}, "sparkle": {"bypass": True}})
    steps = {step.name: step.args for step in pipeline.steps}
    assert steps["glow"] == (("radius", 2), ("intensity", 0.5))
    assert steps["sparkle"] == (("bypass", True),)
    assert pipeline.names == DEFAULT_EFFECT_ORDER


def test_unknown_effect_name_raises_key_error() -> None:
    with pytest.raises(KeyError):
        default_pipeline({"blur": {}})


def test_unknown_param_raises_value_error() -> None:
    with pytest.raises(ValueError):
        default_pipeline({"glow": {"sigma": 1.0}})


def test_pipeline_rejects_unregistered_step() -> None:
    with pytest.raises(KeyError):
        EffectPipeline(steps=(EffectStep(name="no_such_effect"),))


def test_fully_bypassed_pipeline_renders_white_cell() -> None:
    pipeline = default_pipeline({name: {"bypass": True} for name in DEFAULT_EFFECT_ORDER})
    stamp = Stamp(pixels=np.zeros((5, 8, 4), dtype=np.uint8))

    cell = render_cell(3, stamp, pipeline)

    assert np.array_equal(cell, blank_canvas(8, 5))


def test_warm_up_runs_without_error() -> None:
    warm_up(default_pipeline())
