"""Path algebra for resources inside a book package.

All paths are package-relative, forward-slash separated and carry no leading
or trailing separator. Nothing here touches the filesystem.
"""

from urllib.parse import unquote

SEPARATOR = "/"


def _segments(path: str) -> list[str]:
    return (path or "").replace("\\", SEPARATOR).split(SEPARATOR)


def _apply(stack: list[str], segments: list[str]) -> list[str]:
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            # Climbing above the package root is clamped at the root.
            if stack:
                stack.pop()
            continue
        stack.append(segment)
    return stack


def normalize(path: str) -> str:
    """Return the canonical form of a package path.

    Backslashes become forward slashes, repeated separators collapse, ``.`` and
    ``..`` segments are applied and leading/trailing separators are dropped.

    >>> normalize("//a/b/../c/")
    'a/c'
    """
    return SEPARATOR.join(_apply([], _segments(path)))


def strip_fragment(href: str) -> str:
    """Drop a ``#fragment`` suffix from an href."""
    return (href or "").split("#", 1)[0]


def unquote_href(href: str) -> str:
    """Percent-decode an href; package hrefs are URL references."""
    return unquote(href or "", encoding="utf-8", errors="replace")


def directory_of(path: str) -> str:
    """Return the directory part of a file path ("" for top-level files)."""
    segments = normalize(path).split(SEPARATOR)
    return SEPARATOR.join(segments[:-1])


def extension_of(path: str) -> str:
    """Return the lower-cased extension including its dot, or ""."""
    name = normalize(path).rsplit(SEPARATOR, 1)[-1]
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[-1].lower()


def join(*parts: str) -> str:
    stack: list[str] = []
    for part in parts:
        _apply(stack, _segments(part))
    return SEPARATOR.join(stack)


def resolve(base_path: str, relative_path: str) -> str:
    """Resolve ``relative_path`` against the file ``base_path``.

    The last segment of ``base_path`` is treated as a file name and dropped.
    Any fragment on ``relative_path`` is removed first.

    >>> resolve("OEBPS/content.opf", "../images/x.png")
    'images/x.png'
    """
    stack = _apply([], _segments(directory_of(base_path)))
    return SEPARATOR.join(_apply(stack, _segments(strip_fragment(relative_path))))


def resolve_href(base_path: str, href: str) -> str:
    """Resolve a URL-encoded href (as found in package documents)."""
    return resolve(base_path, unquote_href(strip_fragment(href)))
