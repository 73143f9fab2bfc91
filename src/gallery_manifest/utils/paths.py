"""Map files under the media root to the URLs the front-end loads them from."""

import os
from pathlib import Path


def public_url(path: Path, root: Path, base_url: str) -> str:
    """Return the public URL of ``path``, a file somewhere below ``root``.

    The relative path always uses ``/`` separators and is joined to
    ``base_url`` with exactly one slash. Bytes in a file name that are not
    valid UTF-8 become U+FFFD so the URL can always be written as JSON.
    Raises ValueError if ``path`` is not inside ``root``.
    """
    relative = path.relative_to(root).as_posix()
    # Undecodable names arrive from scandir as lone surrogates.
    relative = os.fsencode(relative).decode("utf-8", errors="replace")
    return f"{base_url.rstrip('/')}/{relative}"
