"""Sandbox context — the capability surface for build-time scripts.

Scripts embedded in ``<script compile>`` elements are Python.  They are
compiled with RestrictedPython and executed against a namespace that holds
only:

- the context bindings (``content``, ``include``, ``compile_file``,
  ``compile_dyn``, ``dom``, ``log``, ``config``, ``build_info``, ``path``,
  ``tween``, ``load_content``),
- RestrictedPython's guard hooks,
- a curated builtin set with no ``__import__``, ``open``, ``eval`` or
  ``exec``.

The value of the script's final expression is the script's result.  The
sandbox restricts what a script can *reach*; it does not bound CPU or
memory, and a failing script fails the whole document.

"""

from __future__ import annotations

import ast
import operator
import textwrap
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from lxml import etree
from RestrictedPython import compile_restricted, safe_builtins
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector

from mews._errors import MewsError, ScriptError
from mews.pipeline.dom import DomQuery

if TYPE_CHECKING:
    from mews.buildinfo import BuildInfo
    from mews.content.store import ContentStore
    from mews.observability.console import ScriptConsole


_INPLACE_OPS: dict[str, Callable[[Any, Any], Any]] = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "|=": operator.ior,
    "&=": operator.iand,
}


def _inplacevar(op: str, target: Any, value: Any) -> Any:
    try:
        return _INPLACE_OPS[op](target, value)
    except KeyError:
        msg = f"in-place operator {op!r} is not allowed in build scripts"
        raise ScriptError(msg) from None


# lxml members that read or write files, or expose the tree object that does.
_LXML_BLOCKED_ATTRS = frozenset({
    "docinfo",
    "getroottree",
    "iterparse",
    "parse",
    "write",
    "write_c14n",
    "xinclude",
    "xslt",
})


def _getattr(obj: Any, name: str, default: Any = None) -> Any:
    if name in _LXML_BLOCKED_ATTRS and isinstance(obj, (etree._Element, etree._ElementTree)):
        msg = f"{name!r} is not available to build scripts"
        raise ScriptError(msg)
    return safer_getattr(obj, name, default)


def _apply(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    return func(*args, **kwargs)


_SCRIPT_BUILTINS: dict[str, Any] = {
    **safe_builtins,
    "all": all,
    "any": any,
    "dict": dict,
    "enumerate": enumerate,
    "filter": filter,
    "frozenset": frozenset,
    "list": list,
    "map": map,
    "max": max,
    "min": min,
    "reversed": reversed,
    "set": set,
    "sum": sum,
}

_GUARDS: dict[str, Any] = {
    "_getattr_": _getattr,
    "_getitem_": default_guarded_getitem,
    "_getiter_": default_guarded_getiter,
    "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
    "_unpack_sequence_": guarded_unpack_sequence,
    "_write_": full_write_guard,
    "_print_": PrintCollector,
    "_inplacevar_": _inplacevar,
    "_apply_": _apply,
}


def tween(seq: Sequence[Any], value: Any) -> list[Any]:
    """Return a new list with *value* between every pair of items.

    ``tween([1, 2, 3], 0) == [1, 0, 2, 0, 3]``; sequences of length 0 or 1
    are returned unchanged (as a list).
    """
    result: list[Any] = []
    for index, item in enumerate(seq):
        if index:
            result.append(value)
        result.append(item)
    return result


class SandboxContext:
    """Named capabilities handed to build scripts.

    One base context exists per build.  The compiler derives a shallow copy
    per document, adding ``content`` (Markdown) or ``dom`` (HTML) for that
    document only.

    Args:
        bindings: Initial name -> value mapping.

    """

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Mapping[str, Any] | None = None) -> None:
        self._bindings: dict[str, Any] = {}
        if bindings:
            self.bind(**bindings)

    @classmethod
    def create(
        cls,
        *,
        store: ContentStore,
        settings: Mapping[str, Any],
        build_info: BuildInfo,
        console: ScriptConsole,
    ) -> SandboxContext:
        """Build the base context for a run.

        The compiler adds ``include``, ``compile_file`` and ``compile_dyn``
        when it is constructed; the driver rebinds ``path`` per task.
        """
        return cls({
            "content": store.lookup,
            "load_content": store.lookup,
            "dom": DomQuery(),
            "log": console,
            "config": settings,
            "build_info": build_info,
            "path": "/",
            "tween": tween,
        })

    def bind(self, **bindings: Any) -> None:
        """Add or replace bindings in place.

        Raises:
            ValueError: If a name starts with an underscore; RestrictedPython
                forbids such names in scripts.

        """
        for name, value in bindings.items():
            if name.startswith("_"):
                msg = f"binding name {name!r} would be unreachable from scripts"
                raise ValueError(msg)
            self._bindings[name] = value

    def derive(self, **bindings: Any) -> SandboxContext:
        """Return a shallow copy with *bindings* added."""
        derived = SandboxContext(self._bindings)
        derived.bind(**bindings)
        return derived

    def __getitem__(self, name: str) -> Any:
        return self._bindings[name]

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def names(self) -> frozenset[str]:
        return frozenset(self._bindings)

    def namespace(self) -> dict[str, Any]:
        """Fresh globals for executing scripts against this context.

        Scripts in one document share a namespace, so names bound by an
        earlier script are visible to later ones.
        """
        return {
            "__builtins__": dict(_SCRIPT_BUILTINS),
            "__name__": "mews_script",
            **_GUARDS,
            **self._bindings,
        }


def run_script(
    source: str,
    namespace: dict[str, Any],
    *,
    filename: str = "<script>",
) -> Any:
    """Execute *source* in *namespace* and return its final expression.

    The body is dedented first, so scripts can be indented to match the
    surrounding markup.  If the last statement is not an expression the
    result is ``None``.

    Raises:
        ScriptError: On syntax errors, sandbox policy violations, or any
            non-mews exception raised by the script.  Mews errors raised by
            nested compiles propagate unchanged.

    """
    code = textwrap.dedent(source.strip("\n"))
    try:
        tree = ast.parse(code, filename=filename)
    except SyntaxError as exc:
        msg = f"{filename}: invalid script: {exc}"
        raise ScriptError(msg) from exc

    tail: ast.expr | None = None
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        tail = tree.body.pop().value

    try:
        body_code = (
            compile_restricted(ast.unparse(tree), filename=filename, mode="exec")
            if tree.body else None
        )
        tail_code = (
            compile_restricted(ast.unparse(tail), filename=filename, mode="eval")
            if tail is not None else None
        )
    except SyntaxError as exc:
        msg = f"{filename}: script rejected by sandbox: {exc}"
        raise ScriptError(msg) from exc

    try:
        if body_code is not None:
            exec(body_code, namespace)  # noqa: S102
        if tail_code is None:
            return None
        return eval(tail_code, namespace)  # noqa: S307
    except MewsError:
        raise
    except Exception as exc:
        msg = f"{filename}: script raised {type(exc).__name__}: {exc}"
        raise ScriptError(msg) from exc
