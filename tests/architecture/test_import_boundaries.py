"""依存境界（core / text / export / api）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path


def _repo_root() -> Path:
    path = Path(__file__).resolve()
    for parent in path.parents:
        if (parent / "src").is_dir() and (parent / "tests").is_dir():
            return parent
    raise RuntimeError("repo root が見つからない")


def _module_package(path: Path, src_root: Path) -> str:
    # `pkg/__init__.py` も `pkg/mod.py` も、相対 import の基準は `pkg`。
    parts = list(path.relative_to(src_root).with_suffix("").parts)
    return ".".join(parts[:-1])


def _imported_modules(path: Path, src_root: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    package = _module_package(path, src_root)
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(str(alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            level = int(node.level or 0)
            if level == 0:
                base = str(node.module or "")
            else:
                pkg_parts = package.split(".")
                base_parts = pkg_parts[: len(pkg_parts) - (level - 1)]
                base = ".".join([*base_parts, *([node.module] if node.module else [])])
            if base:
                modules.add(base)
                modules.update(f"{base}.{a.name}" for a in node.names if a.name != "*")
    return modules


def _assert_no_forbidden_imports(*, root: Path, forbidden_prefixes: tuple[str, ...]) -> None:
    repo_root = _repo_root()
    src_root = repo_root / "src"
    violations: list[str] = []
    for path in sorted(root.rglob("*.py")):
        bad = sorted(m for m in _imported_modules(path, src_root) if m.startswith(forbidden_prefixes))
        if bad:
            violations.append(f"{path.relative_to(repo_root)}: {', '.join(bad)}")

    if violations:
        joined = "\n".join(violations)
        raise AssertionError(f"依存境界違反の import を検出:\n{joined}")


def test_core_does_not_depend_on_outer_layers() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "mojibench" / "core",
        forbidden_prefixes=(
            "mojibench.api",
            "mojibench.export",
            "mojibench.text",
            "mojibench.telemetry",
            "mojibench.runtime_config",
            "psutil",
            "yaml",
        ),
    )


def test_export_does_not_depend_on_api() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "mojibench" / "export",
        forbidden_prefixes=("mojibench.api", "mojibench.runtime_config"),
    )


def test_relative_imports_are_resolved() -> None:
    root = _repo_root()
    init = root / "src" / "mojibench" / "api" / "__init__.py"
    modules = _imported_modules(init, root / "src")
    assert "mojibench.api.run" in modules
    assert "mojibench.api.run.run_benchmark" in modules
