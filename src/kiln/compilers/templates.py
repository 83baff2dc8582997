"""Templates rendered to static HTML.

kida is the preferred backend, jinja2 the fallback (``pip install
kiln-assets[jinja]``). Both expose the same loader/environment API, so one adapter
serves either module.

The loader searches the source file's directory first, then the search
paths innermost-first, so ``{% include %}`` and ``{% extends %}`` pick the
nearest match. ``args.options`` becomes the render context.
"""

from types import ModuleType

import anyio

from kiln.compilers.protocol import CompileArgs
from kiln.errors import CompilerError


class TemplateCompiler:
    """Render ``.tmpl`` sources to ``.html``."""

    __slots__ = ("_lib",)

    source_extension = "tmpl"

    def __init__(self, lib: ModuleType) -> None:
        self._lib = lib

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> str:
        dirs = [args.source_path.parent]
        dirs.extend(path for path in reversed(args.search_paths) if path not in dirs)

        def run() -> str:
            loader = self._lib.ChoiceLoader([self._lib.FileSystemLoader(str(d)) for d in dirs])
            env = self._lib.Environment(loader=loader)
            template = env.from_string(source.decode("utf-8"))
            return template.render(dict(args.options))

        try:
            return await anyio.to_thread.run_sync(run)
        except Exception as exc:
            raise CompilerError(f"Template {name!r} failed to render: {exc}", path=args.source_path) from exc
