# models.py
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr

# a decoded entry, straight from the bundle; nothing about its shape is guaranteed
RawRecord = Dict[str, Any]


class WordLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class WordCategory(str, Enum):
    DAILY_LIFE = "DAILY_LIFE"
    BUSINESS = "BUSINESS"
    ACADEMIC = "ACADEMIC"
    TECHNOLOGY = "TECHNOLOGY"
    TRAVEL = "TRAVEL"
    FOOD = "FOOD"
    SPORTS = "SPORTS"
    ENTERTAINMENT = "ENTERTAINMENT"
    OTHER = "OTHER"


class WordRow(BaseModel):
    """
    One row of the `words` table, built from a RawRecord.
    Populated by source key (chunk / english / vietnamese); timestamps are
    left to the database.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    english_word: StrictStr = Field(alias="chunk")
    meaning: StrictStr = ""
    example_sentence: StrictStr = Field(alias="english")
    translation: StrictStr = Field(alias="vietnamese")
    level: WordLevel = WordLevel.BEGINNER
    category: WordCategory = WordCategory.DAILY_LIFE
    is_active: bool = True


# source key -> column, in the order records are checked
SOURCE_FIELDS = {
    "chunk": "english_word",
    "english": "example_sentence",
    "vietnamese": "translation",
}
