"""Import search paths for compilers.

Stylesheet and template compilers resolve ``@import`` / ``{% include %}``
against a list of directories. For a source file nested inside the source
tree, those are the directories between the file and the source root::

    resolve_search_paths(Path("/src/a/b/app.less"), Path("/src"))
    # (Path("/src/a"), Path("/src/a/b"))
"""

from pathlib import Path


def resolve_search_paths(source_file: Path, source_root: Path) -> tuple[Path, ...]:
    """Return the ancestor directories of *source_file* below *source_root*.

    Ordered outermost-first, innermost (the file's own directory) last.
    ``source_root`` itself is never included. When ``source_root`` is not
    an ancestor of the file, the walk stops at the filesystem root.
    """
    dirs: list[Path] = []
    current = source_file.parent
    while current != source_root:
        dirs.append(current)
        parent = current.parent
        if parent == current:
            break
        current = parent
    dirs.reverse()
    return tuple(dirs)
