"""Mews — a static-site build pipeline with sandboxed build-time scripts.

Turns a tree of templated HTML, Markdown and asset sources into a compiled
output tree.  References between files are discovered while compiling and
scheduled on a breadth-first work queue; inline ``<script compile>`` blocks
run inside a RestrictedPython sandbox and replace themselves with the value
of their final expression.

Quick start::

    import mews

    result = mews.build("my-site/")

Project layout::

    my-site/
        config.json       {"src": "index.html", "out": "dist"}
        src/
            index.html    entry file, may reference others via compile-ref
            posts/*.md    Markdown with key=value front matter

"""

__version__ = "0.1.0"
__all__ = [
    "MewsConfig",
    "__version__",
    "build",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import mews`` fast; lxml, patitas and RestrictedPython are only
    imported when a build actually runs.
    """
    if name == "MewsConfig":
        from mews.config import MewsConfig

        return MewsConfig

    if name == "load_config":
        from mews.config_loader import load_config

        return load_config

    if name == "build":
        from mews.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
