# sql_emitter.py
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from errors import EmptyDatasetError, FieldMappingError
from models import SOURCE_FIELDS, RawRecord, WordRow

logger = logging.getLogger(__name__)

TABLE = "words"
COLUMNS = (
    "english_word",
    "meaning",
    "example_sentence",
    "translation",
    "level",
    "category",
    "is_active",
    "created_at",
    "updated_at",
)
TIMESTAMP_CALL = "NOW()"


def quote_literal(value: str) -> str:
    """Render `value` as a SQL string literal, doubling single quotes."""
    return "'" + value.replace("'", "''") + "'"


def to_word_row(record: RawRecord, index: int) -> WordRow:
    """
    Map one decoded record to a WordRow.
    Only chunk / english / vietnamese are read; anything else in the record is ignored.
    """
    if not isinstance(record, Mapping):
        raise FieldMappingError(index, "<record>", f"is not an object (got {type(record).__name__})")
    source = {key: record[key] for key in SOURCE_FIELDS if key in record}
    try:
        return WordRow.model_validate(source)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "<record>"
        column = SOURCE_FIELDS.get(field, field)
        if error["type"] == "missing":
            reason = f"is missing (needed for {column})"
        else:
            reason = f"must be a string for {column} (got {type(source.get(field)).__name__})"
        raise FieldMappingError(index, field, reason) from exc


def render_row(row: WordRow) -> str:
    values = [
        quote_literal(row.english_word),
        quote_literal(row.meaning),
        quote_literal(row.example_sentence),
        quote_literal(row.translation),
        quote_literal(row.level.value),
        quote_literal(row.category.value),
        str(row.is_active).lower(),
        TIMESTAMP_CALL,
        TIMESTAMP_CALL,
    ]
    return "(" + ", ".join(values) + ")"


def build_rows(records: Iterable[RawRecord]) -> List[WordRow]:
    return [to_word_row(record, index) for index, record in enumerate(records)]


def render_insert(records: Iterable[RawRecord]) -> str:
    """
    Build the single INSERT statement for all records.
    Every record is mapped before any SQL is produced, so a bad record
    means no statement at all.
    """
    rows = build_rows(records)
    if not rows:
        raise EmptyDatasetError("Data block contains no records, refusing to write an empty INSERT")
    values = ",\n".join(render_row(row) for row in rows)
    logger.info("Rendered %d rows for table %s", len(rows), TABLE)
    return f"INSERT INTO {TABLE} ({', '.join(COLUMNS)}) VALUES {values};"


def write_script(sql: str, path) -> Path:
    """
    Write the statement to `path`, replacing whatever was there.
    The text is encoded before the file is opened, so an unencodable
    statement never truncates an existing script.
    """
    data = sql.encode("utf-8")
    path = Path(path)
    with open(path, "wb") as f:
        f.write(data)
    return path
