# どこで: `src/mojibench/core/context.py`。
# 何を: 1 セル分の描画状態（書き込み先キャンバス + 読み取り専用スタンプ + スカラー引数）を定義する。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(slots=True)
class DrawContext:
    """effect パイプラインへ渡すセル単位の描画コンテキスト。

    Attributes
    ----------
    canvas : np.ndarray
        書き込み先。uint8 型 shape (H, W, 4)。1 セルのレンダリングが排他的に所有する。
    base_x, base_y : int
        スタンプ原点を置くキャンバス座標。新規セルでは常に (0, 0)。
    text_stamp : np.ndarray
        読み取り専用スタンプ配列。uint8 型 shape (h, w, 4)。
    cell_index : int
        セル番号。effect の決定的な揺らぎのシードとして使う。
    stamp_w, stamp_h : int
        スタンプ寸法。
    """

    canvas: np.ndarray
    base_x: int
    base_y: int
    text_stamp: np.ndarray
    cell_index: int
    stamp_w: int
    stamp_h: int


__all__ = ["DrawContext"]
