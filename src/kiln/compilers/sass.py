"""SCSS stylesheets via libsass (``pip install kiln-assets[sass]``)."""

from types import ModuleType

import anyio

from kiln.compilers.protocol import CompileArgs
from kiln.errors import CompilerError


class SassCompiler:
    """Compile ``.scss`` sources to CSS.

    Import resolution uses the search paths followed by the source file's
    own directory, so a partial next to the file is always found.
    ``args.options`` is passed through to ``sass.compile`` (``output_style``,
    ``precision``, ``source_comments``...).
    """

    __slots__ = ("_lib",)

    source_extension = "scss"

    def __init__(self, lib: ModuleType) -> None:
        self._lib = lib

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> str:
        include_paths = [str(path) for path in args.search_paths]
        own_dir = str(args.source_path.parent)
        if own_dir not in include_paths:
            include_paths.append(own_dir)

        def run() -> str:
            return self._lib.compile(
                string=source.decode("utf-8"),
                include_paths=include_paths,
                **dict(args.options),
            )

        try:
            return await anyio.to_thread.run_sync(run)
        except Exception as exc:
            raise CompilerError(f"Sass compilation of {name!r} failed: {exc}", path=args.source_path) from exc
