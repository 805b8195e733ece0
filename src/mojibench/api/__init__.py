# どこで: `src/mojibench/api/__init__.py`。
# 何を: 公開 API（run_benchmark と、ユーザー定義 effect 登録用の effect）を再エクスポートする。

from __future__ import annotations

from .run import BenchmarkResult, run_benchmark
from mojibench.core.effect_registry import effect

__all__ = ["BenchmarkResult", "effect", "run_benchmark"]
