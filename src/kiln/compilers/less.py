"""LESS stylesheets via lesscpy (``pip install kiln-assets[less]``).

lesscpy resolves ``@import`` relative to the directory of the file it is
parsing. The source is handed over as an in-memory stream carrying the
absolute source filename, so imports resolve next to the real file even
though the pipeline already read the bytes.

``lesscpy.compile()`` recovers from a block left open at end of input by
dropping it and returning what it parsed so far, often ``""``. The adapter
drives the parser itself and treats that case as an error too.
"""

import importlib
import io
from types import ModuleType, SimpleNamespace

import anyio

from kiln.compilers.protocol import CompileArgs
from kiln.errors import CompilerError

_LESS_OPTIONS = {"minify": False, "xminify": False, "tabs": False, "spaces": True}


def _strict_parser(parser_module: ModuleType) -> type:
    """A ``LessParser`` that also reports an unexpected end of input."""

    class StrictLessParser(parser_module.LessParser):
        def p_error(self, t):
            if t is None:
                self.register.register(f"E: {self.target}: unexpected end of input, unclosed block")
            return super().p_error(t)

    return StrictLessParser


class LessCompiler:
    """Compile ``.less`` sources to CSS."""

    __slots__ = ("_formatter", "_parser_cls")

    source_extension = "less"

    def __init__(self, lib: ModuleType) -> None:
        self._parser_cls = _strict_parser(importlib.import_module(f"{lib.__name__}.lessc.parser"))
        self._formatter = importlib.import_module(f"{lib.__name__}.lessc.formatter").Formatter

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> str:
        opts = SimpleNamespace(**{key: args.options.get(key, default) for key, default in _LESS_OPTIONS.items()})

        def run() -> str:
            stream = io.StringIO(source.decode("utf-8"))
            stream.name = str(args.source_path)
            # fail_with_exc makes parse() raise on every registered error, warnings included
            parser = self._parser_cls(fail_with_exc=True)
            parser.parse(file=stream)
            return self._formatter(opts).format(parser)

        try:
            return await anyio.to_thread.run_sync(run)
        except Exception as exc:
            raise CompilerError(f"LESS compilation of {name!r} failed: {exc}", path=args.source_path) from exc
