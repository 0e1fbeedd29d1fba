"""Doc comment rendering."""

import re
from typing import List, Optional

# Brackets would otherwise be read as intra-doc links.
_DOC_ESCAPE_RE = re.compile(r"[\[\]]")


def doc_lines(text: Optional[str]) -> List[str]:
    """
    Render a description as `///` lines, one per source line.

    Blank lines are kept, brackets are escaped and trailing whitespace is
    stripped from every line.
    """
    if text is None:
        return []

    lines = []
    for line in text.split("\n"):
        escaped = _DOC_ESCAPE_RE.sub(lambda m: "\\" + m.group(0), line).rstrip()
        lines.append(f"/// {escaped}" if escaped else "///")

    return lines
