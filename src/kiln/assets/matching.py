"""Mount matching — request path to logical asset name.

A mount is a URL prefix plus a destination extension. ``/styles`` with
extension ``css`` matches ``/styles/app.css`` and ``/styles/themes/DARK.CSS``
and captures ``app`` and ``themes/DARK`` as logical names.
"""

import re
from dataclasses import dataclass


def normalize_mount(mount_dir: str) -> str:
    """Ensure *mount_dir* starts and ends with ``/`` (``""`` becomes ``/``)."""
    mount = mount_dir or ""
    if not mount.startswith("/"):
        mount = "/" + mount
    if not mount.endswith("/"):
        mount = mount + "/"
    return mount


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """Compiled mount pattern.

    Matching is anchored on both ends and case-insensitive, so mixed-case
    URLs still hit the mount. The captured name never contains the mount
    prefix or the extension suffix.
    """

    mount: str
    extension: str
    pattern: re.Pattern[str]

    def match(self, path: str) -> str | None:
        """Return the logical name for *path*, or None if it is outside the mount."""
        m = self.pattern.fullmatch(path)
        if m is None:
            return None
        return m.group(1)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.pattern.fullmatch(path) is not None


def build_matcher(mount_dir: str, extension_pattern: str) -> PathMatcher:
    """Build a matcher for *mount_dir* and *extension_pattern*.

    The mount directory is matched literally. The extension is a regex
    fragment so asset types can accept a family of extensions
    (the passthrough type uses ``[a-zA-Z]{2,5}?``).
    """
    mount = normalize_mount(mount_dir)
    pattern = re.compile(
        "^" + re.escape(mount) + r"(.*)\." + extension_pattern + "$",
        re.IGNORECASE,
    )
    return PathMatcher(mount=mount, extension=extension_pattern, pattern=pattern)
