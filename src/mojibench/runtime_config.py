# どこで: `src/mojibench/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 閾値・出力解像度・スタンプ文字列などを、コードを触らずに差し替えられるようにするため。

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """mojibench の実行時設定。"""

    config_path: Path | None
    threshold_secs: float
    max_iterations: int
    workers: int | None
    output_path: Path
    output_size: tuple[int, int]
    annotate: bool
    stamp_text: str
    stamp_margin: int
    font_size: float
    font: Path | None
    effects: dict[str, dict[str, Any]] = field(default_factory=dict)

    def with_overrides(self, **kwargs: Any) -> "RuntimeConfig":
        """None でない値だけを差し替えたコピーを返す（CLI 引数の反映用）。"""
        changes = {k: v for k, v in kwargs.items() if v is not None}
        return dataclasses.replace(self, **changes)


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".mojibench" / "config.yaml",
        home / ".config" / "mojibench" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}")
    try:
        a = int(seq[0])
        b = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [w, h] の整数配列である必要があります: got={value!r}") from exc
    return (a, b)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("mojibench")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="mojibench/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> None:
    """override を base へマージする（mapping 同士のセクションは 1 段だけキー単位で上書き）。"""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            base[key] = merged
        else:
            base[key] = value


def _parse_effects(value: Any) -> dict[str, dict[str, Any]]:
    effects = _as_mapping(value, key="effects")
    out: dict[str, dict[str, Any]] = {}
    for name, params in effects.items():
        out[str(name)] = _as_mapping(params, key=f"effects.{name}")
    return out


def parse_config(payload: dict[str, Any], *, config_path: Path | None = None) -> RuntimeConfig:
    """マージ済み payload を検証して RuntimeConfig を組み立てる。"""

    version = _require(payload.get("version"), key="version")
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    bench = _as_mapping(payload.get("benchmark"), key="benchmark")
    threshold_secs = _require(
        _as_float(bench.get("threshold_secs"), key="benchmark.threshold_secs"),
        key="benchmark.threshold_secs",
    )
    if not threshold_secs > 0:
        raise ValueError(f"benchmark.threshold_secs は正の値である必要があります: got={threshold_secs}")
    max_iterations = _require(
        _as_int(bench.get("max_iterations"), key="benchmark.max_iterations"),
        key="benchmark.max_iterations",
    )
    if max_iterations < 1:
        raise ValueError(f"benchmark.max_iterations は 1 以上である必要があります: got={max_iterations}")
    workers = _as_int(bench.get("workers"), key="benchmark.workers")
    if workers is not None and workers < 1:
        raise ValueError(f"benchmark.workers は 1 以上である必要があります: got={workers}")

    output = _as_mapping(payload.get("output"), key="output")
    output_path = _require(_as_optional_path(output.get("path")), key="output.path")
    output_size = _require(_as_int_pair(output.get("size"), key="output.size"), key="output.size")
    if output_size[0] <= 0 or output_size[1] <= 0:
        raise ValueError(f"output.size は正の (width, height) である必要があります: got={output_size}")
    annotate = bool(output.get("annotate", True))

    stamp = _as_mapping(payload.get("stamp"), key="stamp")
    stamp_text = str(_require(stamp.get("text"), key="stamp.text"))
    stamp_margin = _require(_as_int(stamp.get("margin"), key="stamp.margin"), key="stamp.margin")
    if stamp_margin < 0:
        raise ValueError(f"stamp.margin は 0 以上である必要があります: got={stamp_margin}")
    font_size = _require(_as_float(stamp.get("font_size"), key="stamp.font_size"), key="stamp.font_size")
    if font_size <= 0:
        raise ValueError(f"stamp.font_size は正の値である必要があります: got={font_size}")
    font = _as_optional_path(stamp.get("font"))

    return RuntimeConfig(
        config_path=config_path,
        threshold_secs=float(threshold_secs),
        max_iterations=int(max_iterations),
        workers=workers,
        output_path=output_path,
        output_size=output_size,
        annotate=annotate,
        stamp_text=stamp_text,
        stamp_margin=int(stamp_margin),
        font_size=float(font_size),
        font=font,
        effects=_parse_effects(payload.get("effects")),
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち、セクション内はキー単位）:
    1) 同梱 default_config.yaml
    2) `./.mojibench/config.yaml` / `~/.config/mojibench/config.yaml`
    3) `set_config_path(...)` で指定した config
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        _merge_sections(payload, _load_yaml_config(explicit_path))

    cfg = parse_config(payload, config_path=explicit_path or discovered_path)
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "parse_config", "runtime_config", "set_config_path"]
