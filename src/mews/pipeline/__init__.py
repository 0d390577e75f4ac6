"""Compile pipeline — work queue, compiler dispatch and script sandbox."""

from mews.pipeline.compiler import Compiler, ContentKind, kind_for
from mews.pipeline.dom import DomQuery, HtmlDocument
from mews.pipeline.queue import CompileTask, WorkQueue
from mews.pipeline.sandbox import SandboxContext, run_script, tween

__all__ = [
    "CompileTask",
    "Compiler",
    "ContentKind",
    "DomQuery",
    "HtmlDocument",
    "SandboxContext",
    "WorkQueue",
    "kind_for",
    "run_script",
    "tween",
]
