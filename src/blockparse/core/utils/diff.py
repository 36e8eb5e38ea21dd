"""Unified diffs between two markup strings, one tag per line"""

import difflib
import re


_TAG_BOUNDARY_RE = re.compile(r'>(?=<)')


def markup_lines(markup: str) -> list[str]:
    """Split markup into lines at tag boundaries, keeping line endings."""
    return _TAG_BOUNDARY_RE.sub('>\n', markup).splitlines(keepends=True)


def unified_diff(
    old: str,
    new: str,
    from_label: str = "actual",
    to_label: str = "expected",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new markup. Empty list if identical.

    Normalized markup usually fits on a single line, so both sides are broken
    at tag boundaries first. Every returned line ends with a newline.
    """
    old_lines = [l if l.endswith('\n') else l + '\n' for l in markup_lines(old)]
    new_lines = [l if l.endswith('\n') else l + '\n' for l in markup_lines(new)]
    return list(
        difflib.unified_diff(old_lines, new_lines, fromfile=from_label, tofile=to_label, n=context)
    )
