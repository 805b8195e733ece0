# src/mojibench/core/effect_registry.py
# セル描画 effect の名前と適用関数を対応付けるレジストリ。
# op 名から DrawContext を書き換える関数を引けるようにする。

from __future__ import annotations

import inspect
from collections.abc import ItemsView
from typing import Any, Callable

from mojibench.core.context import DrawContext

EffectFunc = Callable[[DrawContext, tuple[tuple[str, Any], ...]], None]


class EffectRegistry:
    """effect 名と適用関数を対応付けるレジストリ。

    Notes
    -----
    登録された関数のシグネチャは
    ``func(ctx: DrawContext, args: tuple[tuple[str, Any], ...]) -> None``
    を想定する。ctx.canvas をその場で書き換え、戻り値は持たない。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, EffectFunc] = {}
        self._defaults: dict[str, dict[str, Any]] = {}
        self._param_order: dict[str, tuple[str, ...]] = {}

    def _register(
        self,
        name: str,
        func: EffectFunc,
        *,
        overwrite: bool = True,
        param_order: tuple[str, ...] = (),
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """effect を登録する（内部用）。

        Notes
        -----
        登録は `@effect` デコレータ経由に統一する。
        """
        if not overwrite and name in self._items:
            raise ValueError(f"effect '{name}' は既に登録されている")
        self._items[name] = func
        self._param_order[name] = tuple(str(a) for a in param_order)
        self._defaults[name] = dict(defaults or {})

    def get(self, name: str) -> EffectFunc:
        """op 名に対応する effect を取得する。

        Raises
        ------
        KeyError
            未登録の op 名が指定された場合。
        """
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> EffectFunc:
        return self.get(name)

    def items(self) -> ItemsView[str, EffectFunc]:
        """登録済みエントリの (name, func) ビューを返す。"""
        return self._items.items()

    def get_defaults(self, name: str) -> dict[str, Any]:
        """op 名に対応するデフォルト引数辞書を取得する。"""
        return dict(self._defaults.get(name, {}))

    def get_param_order(self, name: str) -> tuple[str, ...]:
        """op 名に対応する引数順序を返す。"""
        return tuple(self._param_order.get(name, ()))


effect_registry = EffectRegistry()
"""グローバルな effect レジストリインスタンス。"""


def effect(
    func: Callable[..., None] | None = None,
    *,
    overwrite: bool = True,
):
    """グローバル effect レジストリ用デコレータ。

    関数名をそのまま op 名として登録する。
    キーワード専用引数はすべて default を持つ必要がある。
    予約引数 ``bypass=True`` を渡すと effect は何もしない。

    Examples
    --------
    @effect
    def glow(ctx, *, radius=3, intensity=0.3):
        ...
    """

    def _defaults_from_signature(f: Callable[..., None]) -> tuple[tuple[str, ...], dict[str, Any]]:
        sig = inspect.signature(f)
        order: list[str] = []
        defaults: dict[str, Any] = {}
        for name, param in sig.parameters.items():
            if param.kind is not inspect.Parameter.KEYWORD_ONLY:
                continue
            if name == "bypass":
                raise ValueError(f"effect '{f.__name__}' は予約引数 'bypass' を宣言できない")
            if param.default is inspect.Parameter.empty:
                raise ValueError(f"effect '{f.__name__}' の引数は default 必須: {name!r}")
            order.append(name)
            defaults[name] = param.default
        return tuple(order), defaults

    def decorator(f: Callable[..., None]) -> Callable[..., None]:
        param_order, defaults = _defaults_from_signature(f)

        def wrapper(ctx: DrawContext, args: tuple[tuple[str, Any], ...]) -> None:
            params: dict[str, Any] = dict(args)
            if bool(params.pop("bypass", False)):
                return
            f(ctx, **params)

        effect_registry._register(
            f.__name__,
            wrapper,
            overwrite=overwrite,
            param_order=("bypass", *param_order),
            defaults={"bypass": False, **defaults},
        )
        return f

    if func is None:
        return decorator
    return decorator(func)


__all__ = ["EffectFunc", "EffectRegistry", "effect", "effect_registry"]
