import pytest

from errors import EmptyDatasetError, FieldMappingError
from models import WordCategory, WordLevel, WordRow
from sql_emitter import (
    COLUMNS,
    quote_literal,
    render_insert,
    render_row,
    to_word_row,
    write_script,
)

CAT = {"chunk": "cat", "english": "The cat sat.", "vietnamese": "con mèo"}


def test_example_statement():
    assert render_insert([CAT]) == (
        "INSERT INTO words (english_word, meaning, example_sentence, translation, "
        "level, category, is_active, created_at, updated_at) VALUES "
        "('cat', '', 'The cat sat.', 'con mèo', 'BEGINNER', 'DAILY_LIFE', true, NOW(), NOW());"
    )


def test_column_list():
    assert render_insert([CAT]).startswith(f"INSERT INTO words ({', '.join(COLUMNS)}) VALUES (")
    assert COLUMNS[-2:] == ("created_at", "updated_at")


def test_rows_joined_by_comma_newline():
    records = [CAT, {"chunk": "dog", "english": "A dog.", "vietnamese": "con chó"}]
    sql = render_insert(records)
    assert sql.endswith(
        "VALUES ('cat', '', 'The cat sat.', 'con mèo', 'BEGINNER', 'DAILY_LIFE', true, NOW(), NOW()),\n"
        "('dog', '', 'A dog.', 'con chó', 'BEGINNER', 'DAILY_LIFE', true, NOW(), NOW());"
    )


@pytest.mark.parametrize("count", [1, 2, 17])
def test_one_tuple_per_record(count):
    records = [dict(CAT, chunk=f"w{i}") for i in range(count)]
    sql = render_insert(records)
    assert sql.count("NOW(), NOW())") == count
    assert sql.count(",\n(") == count - 1


def test_apostrophes_are_doubled():
    row = to_word_row({"chunk": "it's", "english": "It's Bob's.", "vietnamese": "nó"}, 0)
    assert render_row(row).startswith("('it''s', '', 'It''s Bob''s.', 'nó'")


@pytest.mark.parametrize("value", ["", "'", "''", "it's", "a'b'c", "no quotes", "'leading", "trailing'"])
def test_quote_literal_round_trip(value):
    quoted = quote_literal(value)
    assert quoted[0] == quoted[-1] == "'"
    assert quoted[1:-1].replace("''", "'") == value


def test_mapping_ignores_extra_fields():
    record = dict(CAT, meaning="should not leak", level="ADVANCED", id=3)
    row = to_word_row(record, 0)
    assert row == WordRow(
        english_word="cat",
        example_sentence="The cat sat.",
        translation="con mèo",
    )
    assert row.meaning == ""
    assert row.level is WordLevel.BEGINNER
    assert row.category is WordCategory.DAILY_LIFE
    assert row.is_active is True


@pytest.mark.parametrize("field", ["chunk", "english", "vietnamese"])
def test_missing_field(field):
    record = {k: v for k, v in CAT.items() if k != field}
    with pytest.raises(FieldMappingError) as info:
        to_word_row(record, 4)
    assert info.value.index == 4
    assert info.value.field == field
    assert "missing" in str(info.value)


@pytest.mark.parametrize("value", [None, 7, 1.5, True, ["a"], {"x": "y"}])
def test_non_string_field(value):
    with pytest.raises(FieldMappingError, match="must be a string"):
        to_word_row(dict(CAT, english=value), 0)


def test_record_that_is_not_an_object():
    with pytest.raises(FieldMappingError, match="not an object"):
        to_word_row("cat", 2)


def test_one_bad_record_fails_the_whole_statement():
    with pytest.raises(FieldMappingError) as info:
        render_insert([CAT, CAT, {"english": "x", "vietnamese": "y"}])
    assert info.value.index == 2


def test_empty_dataset():
    with pytest.raises(EmptyDatasetError):
        render_insert([])


def test_write_script_overwrites(tmp_path):
    out = tmp_path / "insert_words.sql"
    out.write_text("old content that is longer than the new one", encoding="utf-8")
    write_script("SELECT 1;", out)
    assert out.read_text(encoding="utf-8") == "SELECT 1;"


def test_mapping_error_names_target_column():
    with pytest.raises(FieldMappingError, match=r"chunk' is missing \(needed for english_word\)"):
        to_word_row({"english": "a", "vietnamese": "b"}, 0)
    with pytest.raises(FieldMappingError, match="must be a string for translation"):
        to_word_row(dict(CAT, vietnamese=None), 0)


def test_is_active_rendered_as_sql_boolean():
    assert ", true, NOW(), NOW())" in render_row(to_word_row(CAT, 0))


def test_unencodable_statement_keeps_existing_file(tmp_path):
    out = tmp_path / "insert_words.sql"
    out.write_text("previous run", encoding="utf-8")
    with pytest.raises(UnicodeEncodeError):
        write_script("INSERT INTO words VALUES ('x\ud800');", out)
    assert out.read_text(encoding="utf-8") == "previous run"
