"""
どこで: `src/mojibench/core/pipeline.py`。
何を: 6 種の effect を固定順で 1 セルへ適用する EffectPipeline を提供する。
なぜ: 後段の effect が前段の画素を上書きする前提で見た目が調整されているため、順序をここで一元管理する。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from mojibench.core.context import DrawContext
from mojibench.core.effect_registry import effect_registry
from mojibench.core.raster import blank_canvas

# effect 実装モジュールをインポートしてレジストリに登録させる。
from mojibench.core.effects import glow as _effect_glow  # noqa: F401
from mojibench.core.effects import extrusion as _effect_extrusion  # noqa: F401
from mojibench.core.effects import rotation as _effect_rotation  # noqa: F401
from mojibench.core.effects import sparkle as _effect_sparkle  # noqa: F401
from mojibench.core.effects import surreal as _effect_surreal  # noqa: F401
from mojibench.core.effects import colorful as _effect_colorful  # noqa: F401

DEFAULT_EFFECT_ORDER: tuple[str, ...] = (
    "glow",
    "extrusion",
    "rotation",
    "sparkle",
    "surreal",
    "colorful",
)


@dataclass(frozen=True, slots=True)
class EffectStep:
    """パイプライン中の 1 effect（名前 + 正規化済み引数）。"""

    name: str
    args: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True, slots=True)
class EffectPipeline:
    """effect を順に適用する不変パイプライン。

    Parameters
    ----------
    steps : tuple[EffectStep, ...]
        適用順に並べた effect 列。

    Notes
    -----
    各 effect は同じキャンバスを順に書き換える。全ワーカーで共有されるが状態は持たない。
    """

    steps: tuple[EffectStep, ...]

    def __post_init__(self) -> None:
        for step in self.steps:
            if step.name not in effect_registry:
                raise KeyError(f"未登録の effect です: {step.name!r}")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self.steps)

    def apply(self, ctx: DrawContext) -> None:
        """ctx.canvas に全 effect を順に適用する。"""
        for step in self.steps:
            effect_registry.get(step.name)(ctx, step.args)


def _normalize_args(name: str, params: Mapping[str, Any]) -> tuple[tuple[str, Any], ...]:
    allowed = effect_registry.get_defaults(name)
    unknown = sorted(str(k) for k in params if k not in allowed)
    if unknown:
        raise ValueError(f"effect {name!r} に存在しない引数です: {unknown}")
    order = effect_registry.get_param_order(name)
    return tuple((k, params[k]) for k in order if k in params)


def default_pipeline(overrides: Mapping[str, Mapping[str, Any]] | None = None) -> EffectPipeline:
    """既定順（glow → extrusion → rotation → sparkle → surreal → colorful）のパイプラインを返す。

    Parameters
    ----------
    overrides : Mapping[str, Mapping[str, Any]] or None
        effect 名 → 上書き引数。``{"glow": {"intensity": 0.5}, "sparkle": {"bypass": True}}`` など。
        順序は変更できない。

    Raises
    ------
    KeyError
        overrides に未知の effect 名が含まれる場合。
    ValueError
        effect が受け付けない引数名が含まれる場合。
    """
    ov = dict(overrides or {})
    unknown = sorted(str(k) for k in ov if k not in DEFAULT_EFFECT_ORDER)
    if unknown:
        raise KeyError(f"未知の effect 名です: {unknown}")

    steps = tuple(
        EffectStep(name=name, args=_normalize_args(name, ov.get(name) or {}))
        for name in DEFAULT_EFFECT_ORDER
    )
    return EffectPipeline(steps=steps)


def warm_up(pipeline: EffectPipeline) -> None:
    """numba カーネルを事前にコンパイルさせる。

    計測対象の描画に JIT コンパイル時間が混ざらないよう、
    キャリブレーション前に小さなスタンプで 1 度ずつ描画しておく。
    """
    for w, h in ((1, 1), (3, 2)):
        stamp = np.zeros((h, w, 4), dtype=np.uint8)
        stamp[...] = 255
        stamp.setflags(write=False)
        canvas = blank_canvas(w, h)
        ctx = DrawContext(
            canvas=canvas,
            base_x=0,
            base_y=0,
            text_stamp=stamp,
            cell_index=0,
            stamp_w=w,
            stamp_h=h,
        )
        pipeline.apply(ctx)


__all__ = ["DEFAULT_EFFECT_ORDER", "EffectPipeline", "EffectStep", "default_pipeline", "warm_up"]
