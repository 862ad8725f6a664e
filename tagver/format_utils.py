"""
Output formatting for tagver commands.

Commands produce plain dict records (a version result, a description, one
row per tag). This module turns a stream of records into printable text.
Values that JSON cannot represent (Version objects, datetimes) are written
with their string form.
"""

import json
import os
from typing import Any, Callable, Dict, Iterable, Iterator

import yaml

FORMATS = ('json', 'jsonl', 'yaml', 'table')

Record = Dict[str, Any]


def _dumps(record: Any, **kwargs) -> str:
    return json.dumps(record, ensure_ascii=False, default=str, **kwargs)


def format_jsonl(records: Iterable[Record]) -> Iterator[str]:
    """One JSON object per line, emitted as records arrive."""
    for record in records:
        yield _dumps(record)


def format_json(records: Iterable[Record]) -> Iterator[str]:
    yield _dumps(list(records), indent=2)


def format_yaml(records: Iterable[Record]) -> Iterator[str]:
    # round trip through JSON so Version and datetime values become strings
    plain = json.loads(_dumps(list(records)))
    yield yaml.dump(plain, default_flow_style=False, allow_unicode=True, sort_keys=False)


_FORMATTERS: Dict[str, Callable[[Iterable[Record]], Iterator[str]]] = {
    'jsonl': format_jsonl,
    'json': format_json,
    'yaml': format_yaml,
}


def format_output(records: Iterable[Record], format: str) -> Iterator[str]:
    """
    Format records with one of the text formats.

    Raises:
        ValueError: For 'table' (rendered by the command itself) or an
            unknown format name
    """
    try:
        formatter = _FORMATTERS[format]
    except KeyError:
        raise ValueError(f"Unknown format: {format}") from None
    return formatter(records)


def get_format_from_env(default: str = 'jsonl') -> str:
    """Output format named by TAGVER_FORMAT; unknown values give the default."""
    format = os.environ.get('TAGVER_FORMAT', default).lower()
    return format if format in FORMATS else default
