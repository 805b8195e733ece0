"""telemetry のホスト情報スナップショットのテスト。"""

from __future__ import annotations

from mojibench.telemetry import SystemSnapshot, capture_system_snapshot


def test_snapshot_lines_format() -> None:
    snap = SystemSnapshot(
        hostname="bench-01",
        os_name="Linux 6.1",
        cpu_brand="Example CPU",
        cpu_count=16,
        memory_used_gb=1.5,
        memory_total_gb=8.0,
    )

    assert snap.lines() == [
        "Hostname: bench-01",
        "CPU: Example CPU (16 cores)",
        "OS: Linux 6.1",
        "Memory: 1.50 GB / 8.00 GB",
    ]


def test_capture_system_snapshot_reads_host() -> None:
    snap = capture_system_snapshot()

    assert snap.hostname
    assert snap.cpu_brand
    assert snap.cpu_count >= 1
    assert snap.memory_total_gb > 0.0
    assert 0.0 <= snap.memory_used_gb <= snap.memory_total_gb
    assert len(snap.lines()) == 4
