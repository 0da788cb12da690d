"""Reading the list of targets to measure."""

import logging
import sys
from pathlib import Path

from http_latency.errors import TargetListError

log = logging.getLogger(__name__)

STDIN = "-"


def parse_targets(text: str) -> list[str]:
    """Extract one target per line, skipping blank lines and ``#`` comments."""
    targets: list[str] = []
    for line in text.splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        targets.append(entry)
    return targets


def read_targets(source: Path | str) -> list[str]:
    """Read targets from a file, or from stdin when ``source`` is ``-``.

    Raises:
        TargetListError: If the file cannot be read or decoded

    """
    if str(source) == STDIN:
        return parse_targets(sys.stdin.read())

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TargetListError(f"Unable to read targets from {path}: {exc}") from exc

    targets = parse_targets(text)
    log.info("Loaded %d target(s) from %s", len(targets), path)
    return targets
