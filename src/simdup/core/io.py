from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator, TextIO

from ..errors import MalformedText


def write_jsonl(path: str | Path | None, items: Iterable[Any]) -> None:
    if path is None:
        _dump_lines(sys.stdout, items)
        return
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        _dump_lines(f, items)


def _dump_lines(fh: TextIO, items: Iterable[Any]) -> None:
    for it in items:
        fh.write(json.dumps(it, ensure_ascii=False) + "\n")


def read_texts(path: str | Path | None, field: str = "text") -> Iterator[str]:
    """
    Yield texts from a plain-text file (one per line) or a JSONL file.

    JSONL is detected by the ``.jsonl`` suffix; each record must carry
    ``field``, otherwise MalformedText is raised. ``None`` reads plain lines
    from stdin.
    """
    if path is None:
        yield from _plain_lines(sys.stdin)
        return
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        if p.suffix.lower() == ".jsonl":
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise MalformedText(f"{p}:{lineno}: invalid JSON: {exc}") from exc
                if not isinstance(record, dict) or field not in record:
                    raise MalformedText(f"{p}:{lineno}: record has no {field!r} field")
                yield str(record[field])
        else:
            yield from _plain_lines(f)


def _plain_lines(fh: TextIO) -> Iterator[str]:
    for line in fh:
        line = line.rstrip("\r\n")
        if line:
            yield line
