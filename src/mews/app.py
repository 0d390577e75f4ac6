"""Build driver — wires the pipeline together and runs the work queue.

The loop seeds the queue with the configured entry file and compiles tasks
in FIFO order until the queue drains.  Any failure aborts the whole build;
compiled output is held in memory and only written once every task has
succeeded, so a failed build leaves the output directory untouched.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

from mews._errors import BuildError, MewsError
from mews._types import CompiledOutput, RenamedOutput
from mews.config_loader import load_config
from mews.export.writer import BuildResult, ExportedFile, write_outputs
from mews.observability.events import FileCompiled
from mews.pipeline.compiler import Compiler
from mews.pipeline.queue import CompileTask, WorkQueue


def run_queue(compiler: Compiler, queue: WorkQueue) -> tuple[dict[str, str | bytes], int]:
    """Drain *queue* through *compiler*.

    Before each task the compiler's ``cwd`` is set to the task's base
    directory and the script ``path`` binding to the task's URL path.

    Returns:
        ``(compiled, tasks)`` where *compiled* maps destination relative
        paths to output data in first-seen order.

    Raises:
        BuildError: On the first failing task.

    """
    compiled: dict[str, str | bytes] = {}
    tasks = 0

    while not queue.is_empty():
        task = queue.dequeue()
        tasks += 1
        compiler.cwd = task.base_dir
        compiler.context.bind(path="/" + task.rel_path.lstrip("/"))

        try:
            output: CompiledOutput = compiler.compile(task.rel_path)
        except (MewsError, OSError) as exc:
            print(f"  error compiling {task.rel_path}: {exc}", file=sys.stderr)
            msg = f"Build aborted while compiling {task.rel_path!r}: {exc}"
            raise BuildError(msg) from exc

        dest = task.rel_path.lstrip("/")
        if isinstance(output, RenamedOutput):
            dest, output = output.path, output.text
        compiled[dest] = output

    return compiled, tasks


def build(root: str | Path = ".", **kwargs: object) -> BuildResult:
    """Compile the project at *root*, writing output when configured.

    Args:
        root: Path to the project root (containing ``config.json``).
        **kwargs: Override MewsConfig fields.

    Returns:
        BuildResult describing the run.

    Raises:
        ConfigError: If the project cannot be configured.
        BuildError: If any compile task fails.  Nothing is written.

    """
    from mews.banner import print_banner
    from mews.buildinfo import BuildInfo, read_revision
    from mews.content.store import ContentStore
    from mews.observability import BuildCollector, ScriptConsole
    from mews.pipeline.sandbox import SandboxContext

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    print_banner(config)

    collector = BuildCollector()
    store = ContentStore(config.src_path, collector=collector)
    context = SandboxContext.create(
        store=store,
        settings=config.settings,
        build_info=BuildInfo(revision=read_revision(config.root)),
        console=ScriptConsole(),
    )
    queue = WorkQueue()
    compiler = Compiler(config.src_path, context, queue, store, collector=collector)

    queue.enqueue(CompileTask(config.src_path, config.entry))
    collector.record_queued(config.entry, str(config.src_path), "entry")

    compiled, tasks = run_queue(compiler, queue)

    files: list[ExportedFile] = []
    output_dir = config.output_path
    if config.writes_output and output_dir is not None:
        files = write_outputs(output_dir, compiled)
        for exported in files:
            collector.record_write(
                exported.source_path, str(exported.output_path), exported.size_bytes,
            )
            print(f"  updated {exported.output_path}", file=sys.stderr)

    result = BuildResult(
        compiled=compiled,
        files=tuple(files),
        tasks=tasks,
        duration_ms=(time.perf_counter() - t0) * 1000,
        output_dir=output_dir,
        log=collector.log,
    )
    _print_build_summary(result)
    return result


def _print_build_summary(result: BuildResult) -> None:
    """Print build completion summary to stderr."""
    count = len(result.compiled)
    lines = [
        "",
        "─" * 41,
        f"  Compiled {count} file{'s' if count != 1 else ''}"
        f" from {result.tasks} task{'s' if result.tasks != 1 else ''}",
    ]
    if result.files:
        written = len(result.files)
        lines.append(f"  Wrote {written} file{'s' if written != 1 else ''}")
        lines.append(f"  Output: {result.output_dir}")
    else:
        lines.append("  Output: not written")
    stats = result.log.stats()
    cache_hits = sum(1 for event in result.log.query(FileCompiled) if event.cached)
    counts = ", ".join(f"{name} {n}" for name, n in sorted(stats["by_type"].items()))
    lines.append(f"  Cache hits: {cache_hits}")
    lines.append(f"  Events: {stats['total']} ({counts})")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)
