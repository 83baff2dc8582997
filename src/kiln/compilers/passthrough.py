"""Identity compiler: copies the source to the destination unchanged."""

from kiln.compilers.protocol import CompileArgs


class PassthroughCompiler:
    """Serve any source file from the build tree as-is."""

    __slots__ = ()

    source_extension = None

    async def compile(self, name: str, source: bytes, args: CompileArgs) -> bytes:
        return source
