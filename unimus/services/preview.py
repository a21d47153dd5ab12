"""Tabular previews of uploaded dataset files.

Each supported format registers a parser with `registry`; a parser turns the
decoded file text into headers, at most `row_limit` typed rows and the total
number of data rows in the file.
"""

import asyncio
import json
import math
import re
from pathlib import Path
from typing import Any, Callable, NamedTuple

from structlog import get_logger

from unimus.api.schemas.dataset_file import Cell, DatasetPreview
from unimus.config import Settings, get_settings
from unimus.errors import NotFound, Unsupported
from unimus.models import DatasetFile

logger = get_logger(__name__)

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class Table(NamedTuple):
    headers: list[str]
    rows: list[list[Cell]]
    total_rows: int


EMPTY_TABLE = Table([], [], 0)

Parser = Callable[[str, int], Table]


class ParserRegistry:
    def __init__(self) -> None:
        self._parsers: dict[str, Parser] = {}

    def register(self, file_format: str) -> Callable[[Parser], Parser]:
        def decorator(func: Parser) -> Parser:
            self._parsers[file_format] = func
            return func

        return decorator

    def get(self, file_format: str) -> Parser:
        if file_format not in self._parsers:
            raise Unsupported(f"No preview available for format '{file_format}'")
        return self._parsers[file_format]

    @property
    def formats(self) -> list[str]:
        return sorted(self._parsers)


registry = ParserRegistry()


def _strip_once(token: str, quote: str) -> str:
    if token.startswith(quote):
        token = token[1:]
    if token.endswith(quote):
        token = token[:-1]
    return token


def parse_cell(token: str, null_tokens: tuple[str, ...] = ()) -> Cell:
    """Type a single cell: null, int, float, or the trimmed text."""
    value = token.strip()
    if value == "" or value.lower() == "null" or value in null_tokens:
        return None
    if _NUMBER.match(value):
        if "." not in value and "e" not in value.lower():
            return int(value)
        number = float(value)
        if math.isfinite(number):
            return number
    return value


def split_csv_line(line: str) -> list[str]:
    """Split on commas outside double quotes, then trim and unquote each token."""
    tokens = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == "," and not in_quotes:
            tokens.append("".join(current))
            current = []
        else:
            current.append(char)
    tokens.append("".join(current))
    return [_strip_once(token.strip(), '"') for token in tokens]


@registry.register("csv")
def parse_csv(text: str, row_limit: int) -> Table:
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return EMPTY_TABLE

    headers = split_csv_line(lines[0])
    rows = [
        [parse_cell(token) for token in split_csv_line(line)]
        for line in lines[1 : row_limit + 1]
    ]
    return Table(headers, rows, max(len(lines) - 1, 0))


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def _json_cell(value: Any) -> Cell:
    if value is None:
        return None
    if isinstance(value, bool):
        return _stringify(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return _stringify(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name}")


@registry.register("json")
def parse_json(text: str, row_limit: int) -> Table:
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        logger.info("Unparseable JSON, returning empty preview")
        return EMPTY_TABLE

    if isinstance(data, list) and data and isinstance(data[0], dict):
        headers = list(data[0])
        rows = []
        for record in data[:row_limit]:
            if not isinstance(record, dict):
                record = {}
            rows.append([_json_cell(record.get(header)) for header in headers])
        return Table(headers, rows, len(data))

    if isinstance(data, dict):
        headers = list(data)
        return Table(headers, [[_json_cell(data[header]) for header in headers]], 1)

    return Table(["value"], [[_stringify(data)]], 1)


def split_arff_line(line: str) -> list[str]:
    return [
        _strip_once(_strip_once(token.strip(), "'"), '"') for token in line.split(",")
    ]


@registry.register("arff")
def parse_arff(text: str, row_limit: int) -> Table:
    lines = text.split("\n")
    headers = []
    data_start = None
    for index, raw in enumerate(lines):
        line = raw.strip()
        if line.lower() == "@data":
            data_start = index + 1
            break
        if line.lower().startswith("@attribute"):
            parts = line.split()
            if len(parts) > 1:
                headers.append(parts[1])

    if data_start is None:
        return EMPTY_TABLE

    data_lines = [
        line.strip()
        for line in lines[data_start:]
        if line.strip() and not line.strip().startswith("%")
    ]
    rows = [
        [parse_cell(token, null_tokens=("?",)) for token in split_arff_line(line)]
        for line in data_lines[:row_limit]
    ]
    return Table(headers, rows, len(data_lines))


def preview_content(
    content: bytes, file_format: str, file_type: str, row_limit: int = 20
) -> DatasetPreview:
    """Parse `content` with the parser for `file_format`.

    Raises:
        Unsupported: if no parser is registered for the format
    """
    parser = registry.get(file_format.lower())
    table = parser(content.decode("utf-8", errors="replace"), row_limit)
    return DatasetPreview(
        headers=table.headers,
        rows=table.rows,
        total_rows=table.total_rows,
        file_type=file_type,
    )


def resolve_format(dataset_file: DatasetFile) -> str:
    """The filename extension wins over the declared type."""
    return dataset_file.extension or dataset_file.type.lower()


async def read_file(path: Path) -> bytes:
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise NotFound(f"File {path} could not be read") from e


async def preview_dataset_file(
    dataset_file: DatasetFile, settings: Settings | None = None
) -> DatasetPreview | None:
    """Preview the first rows of a stored file, or None if it can't be previewed.

    Relative paths are resolved against `UPLOAD_DIR`.
    """
    settings = settings or get_settings()
    log = logger.bind(file_id=dataset_file.id, dataset_id=dataset_file.dataset_id)
    file_format = resolve_format(dataset_file)

    try:
        registry.get(file_format)
        content = await read_file(Path(settings.UPLOAD_DIR) / dataset_file.path)
    except (NotFound, Unsupported) as e:
        log.info("Preview unavailable", reason=e.detail)
        return None

    return preview_content(
        content, file_format, dataset_file.type, settings.PREVIEW_ROW_LIMIT
    )
