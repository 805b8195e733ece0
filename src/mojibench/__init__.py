# どこで: `src/mojibench/__init__.py`。
# 何を: ルート `mojibench` パッケージを定義する。
# なぜ: import 起点を `mojibench` に統一するため。

from __future__ import annotations

from mojibench.api import BenchmarkResult, effect, run_benchmark

__all__ = ["BenchmarkResult", "effect", "run_benchmark"]
