"""Per-request compile context.

One ``CompileContext`` is built for each matched request and threaded
through the pipeline stages. It is frozen: a hook that needs to change a
value returns a new context built with ``dataclasses.replace``.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class CompileContext:
    """What one pipeline run is compiling, and where.

    Attributes:
        source_root: Absolute root of the source tree.
        dest_root: Absolute root of the compiled output tree.
        relative_path: Request path in platform separators, without the
            leading separator (``styles/app.css``).
        name: Logical asset name captured by the mount matcher (``app``).
    """

    source_root: Path
    dest_root: Path
    relative_path: str
    name: str
