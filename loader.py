# loader.py
import logging
import os
import sys
from pathlib import Path

from bundle_locator import DEFAULT_MARKER, locate_literal
from errors import WordImportError
from js_literal import parse_literal
from sql_emitter import render_insert, write_script

BUNDLE_PATH = os.getenv("WORDS_BUNDLE_PATH", "index.js")
SQL_PATH = os.getenv("WORDS_SQL_PATH", "insert_words.sql")
MARKER = os.getenv("WORDS_MARKER", DEFAULT_MARKER)

logger = logging.getLogger("loader")


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_sql(bundle_text: str, marker: str = MARKER) -> str:
    """Locate, decode and render: the whole pipeline minus file I/O."""
    raw = locate_literal(bundle_text, marker)
    records = parse_literal(raw)
    return render_insert(records)


def generate(bundle_path=BUNDLE_PATH, sql_path=SQL_PATH, marker: str = MARKER) -> Path:
    """
    Read the bundle, build the INSERT statement and write it to `sql_path`.
    The output file is only touched once the statement is complete.
    """
    bundle_path = Path(bundle_path)
    if not bundle_path.exists():
        raise FileNotFoundError(f"Bundle not found: {bundle_path}")
    with open(bundle_path, "r", encoding="utf-8") as f:
        bundle_text = f.read()
    sql = build_sql(bundle_text, marker)
    return write_script(sql, sql_path)


def main() -> int:
    setup_logging()
    try:
        out = generate(BUNDLE_PATH, SQL_PATH, MARKER)
    except (WordImportError, OSError, UnicodeError) as e:
        logger.error("Import failed: %s", e)
        return 1
    logger.info("SQL file generated at %s", out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
