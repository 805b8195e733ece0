"""
どこで: `tools/benchmarks/cases.py`。
何を: effect ベンチ用の入力スタンプ（ケース）を生成する。
なぜ: 「小さい」「横長」「明るい画素が多い」など特徴の違いで effect ごとの性能差を比較するため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mojibench.core.raster import Stamp
from mojibench.text.stamp import rainbow_fill


@dataclass(frozen=True, slots=True)
class BenchmarkCase:
    """effect ベンチ入力ケース。

    Attributes
    ----------
    case_id : str
        安定な識別子。
    label : str
        レポート表示用の短い名前。
    description : str
        目的・形状・規模の説明。
    stamp : Stamp
        入力スタンプ（セル寸法もこれに一致する）。
    """

    case_id: str
    label: str
    description: str
    stamp: Stamp


def describe_stamp(stamp: Stamp) -> dict[str, int]:
    """Stamp の規模情報を辞書で返す。"""
    px = stamp.pixels.astype(np.int32)
    lum = (px[:, :, 0] + px[:, :, 1] + px[:, :, 2]) // 3
    white = np.all(px[:, :, :3] == 255, axis=2)
    return {
        "width": stamp.width,
        "height": stamp.height,
        "n_pixels": int(stamp.width * stamp.height),
        "bright_pixels": int(np.count_nonzero(lum > 200)),
        "ink_pixels": int(np.count_nonzero(~white)),
    }


def build_default_cases(*, seed: int) -> list[BenchmarkCase]:
    """ベンチの既定ケース列を生成して返す。

    Notes
    -----
    フォントに依存しないよう、被覆率マスクを合成してから虹色スタンプへ変換する。
    """
    rng = np.random.default_rng(int(seed))

    cases: list[BenchmarkCase] = []

    cases.append(
        BenchmarkCase(
            case_id="pixel",
            label="stamp (1x1)",
            description="最小ケース（1 画素）",
            stamp=Stamp(pixels=rainbow_fill(np.full((1, 1), 255, dtype=np.uint8))),
        )
    )
    cases.append(
        BenchmarkCase(
            case_id="glyphs_default",
            label="glyphs (420x96)",
            description="既定フォントサイズ相当の文字列スタンプ（縦縞の擬似グリフ）",
            stamp=Stamp(pixels=rainbow_fill(_striped_coverage(width=420, height=96, period=11))),
        )
    )
    cases.append(
        BenchmarkCase(
            case_id="glyphs_wide",
            label="glyphs (1200x64)",
            description="横長スタンプ（列方向の色相グラデーションが長い）",
            stamp=Stamp(pixels=rainbow_fill(_striped_coverage(width=1200, height=64, period=17))),
        )
    )
    cases.append(
        BenchmarkCase(
            case_id="noise",
            label="noise (256x256)",
            description="一様乱数の被覆率（明暗の画素が混在し sparkle の分岐が散る）",
            stamp=Stamp(pixels=rainbow_fill(_noise_coverage(width=256, height=256, rng=rng))),
        )
    )
    cases.append(
        BenchmarkCase(
            case_id="blank",
            label="blank (320x80)",
            description="被覆率 0 の白スタンプ（明るい画素のみ）",
            stamp=Stamp(pixels=rainbow_fill(np.zeros((80, 320), dtype=np.uint8))),
        )
    )

    return cases


def _striped_coverage(*, width: int, height: int, period: int) -> np.ndarray:
    w = max(1, int(width))
    h = max(1, int(height))
    p = max(2, int(period))

    x = np.arange(w, dtype=np.int32)
    y = np.arange(h, dtype=np.int32)
    # 文字のストロークに見立てた縦縞 + 上下の余白。
    stroke = (x % p) < (p // 2)
    body = (y >= h // 8) & (y < h - h // 8)
    mask = body[:, None] & stroke[None, :]
    return np.where(mask, 255, 0).astype(np.uint8)


def _noise_coverage(*, width: int, height: int, rng: np.random.Generator) -> np.ndarray:
    w = max(1, int(width))
    h = max(1, int(height))
    return rng.integers(0, 256, size=(h, w), dtype=np.uint8)
