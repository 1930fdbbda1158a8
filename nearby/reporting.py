"""Output writers for a finished search."""
from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from typing import Dict, Iterator, List, TextIO

from .models import SearchResult

PLACES_FILENAME = "places.json"
SUMMARY_FILENAME = "summary.txt"


@contextmanager
def atomic_writer(path: str, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Write to a sibling temp file and move it over ``path`` only on success."""
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=os.path.dirname(path) or "."
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_outputs(result: SearchResult, summary_lines: List[str], out_dir: str) -> Dict[str, str]:
    """Write the response payload and the text summary; return their paths."""
    os.makedirs(out_dir, exist_ok=True)
    places_path = os.path.join(out_dir, PLACES_FILENAME)
    summary_path = os.path.join(out_dir, SUMMARY_FILENAME)

    with atomic_writer(places_path) as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
    with atomic_writer(summary_path) as f:
        f.write("\n".join(summary_lines))

    return {"places": places_path, "summary": summary_path}
