# どこで: `src/mojibench/telemetry.py`。
# 何を: 結果画像へ書き込むホスト情報（ホスト名/CPU/OS/メモリ）のスナップショットを取得する。
# なぜ: スコアだけでは比較できないため、計測したマシンの素性を画像に焼き込むため。

from __future__ import annotations

import platform
import socket
from dataclasses import dataclass
from pathlib import Path

_BYTES_PER_GB = 1024.0**3


@dataclass(frozen=True, slots=True)
class SystemSnapshot:
    """ベンチマーク実行時点のホスト情報。"""

    hostname: str
    os_name: str
    cpu_brand: str
    cpu_count: int
    memory_used_gb: float
    memory_total_gb: float

    def lines(self) -> list[str]:
        """注釈パネルに並べる 4 行を返す。"""
        return [
            f"Hostname: {self.hostname}",
            f"CPU: {self.cpu_brand} ({self.cpu_count} cores)",
            f"OS: {self.os_name}",
            f"Memory: {self.memory_used_gb:.2f} GB / {self.memory_total_gb:.2f} GB",
        ]


def _cpu_brand() -> str:
    # Linux では platform.processor() が空になりやすいので /proc/cpuinfo を先に見る。
    cpuinfo = Path("/proc/cpuinfo")
    if cpuinfo.is_file():
        try:
            text = cpuinfo.read_text(encoding="utf-8", errors="replace")
        except OSError:
            text = ""
        for line in text.splitlines():
            key, sep, value = line.partition(":")
            if sep and key.strip() == "model name" and value.strip():
                return value.strip()

    brand = platform.processor().strip() or platform.machine().strip()
    return brand or "Unknown CPU"


def _os_name() -> str:
    system = platform.system().strip()
    if not system:
        return "Unknown OS"
    release = platform.release().strip()
    return f"{system} {release}".strip()


def capture_system_snapshot() -> SystemSnapshot:
    """psutil と platform からホスト情報を 1 度だけ取得する。"""

    try:
        import psutil  # type: ignore[import-untyped]
    except Exception as exc:
        raise RuntimeError("capture_system_snapshot には psutil が必要です") from exc

    mem = psutil.virtual_memory()
    cpu_count = psutil.cpu_count(logical=True) or 1
    hostname = socket.gethostname().strip() or "Unknown"

    return SystemSnapshot(
        hostname=hostname,
        os_name=_os_name(),
        cpu_brand=_cpu_brand(),
        cpu_count=int(cpu_count),
        memory_used_gb=float(mem.used) / _BYTES_PER_GB,
        memory_total_gb=float(mem.total) / _BYTES_PER_GB,
    )


__all__ = ["SystemSnapshot", "capture_system_snapshot"]
