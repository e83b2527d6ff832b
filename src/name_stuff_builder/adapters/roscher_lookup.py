"""Roscher's Lexicon of Mythology 索引による出典照合.

索引 TSV（RLM_Index_tab_A.csv / RLM_Index_tab_B.csv、headword と subject_type 列）から
人格を持つ存在（神・登場人物・ニンフなど）の見出し語だけを拾い、mythological の照合に使う。
"""

from __future__ import annotations

import re
from pathlib import Path

import polars as pl
from loguru import logger

INDEX_FILES = ("RLM_Index_tab_A.csv", "RLM_Index_tab_B.csv")

ENTITY_TYPES = frozenset(
    {
        "deity",
        "character",
        "nymph",
        "collective_deity",
        "centaur",
        "satyr",
        "collective_character",
        "creature",
        "hybrid",
        "collective_creature",
        "serpent",
    }
)

PROVIDED_TAG = "mythological"

_NUMERIC_SUFFIX = re.compile(r"\s+\d+$")


def clean_headword(headword: str) -> str | None:
    """見出し語の " 1" のような番号を外す。名前として使えないものは None.

    Examples:
        >>> clean_headword("Aphrodite 2")
        'Aphrodite'
        >>> clean_headword("Zeus (Kult)") is None
        True
    """
    name = _NUMERIC_SUFFIX.sub("", headword).strip()
    if len(name) < 2 or "(" in name or ")" in name:
        return None
    return name


class RoscherLexiconLookup:
    """Roscher 索引から mythological の名前集合を返す ProvenanceLookup.

    Args:
        source_dir: 索引 TSV を含むディレクトリ（存在しないファイルは読み飛ばす）
    """

    def __init__(self, source_dir: Path | str) -> None:
        self.source_dir = Path(source_dir)
        self._names: set[str] | None = None

    def _load(self) -> set[str]:
        names: set[str] = set()
        for filename in INDEX_FILES:
            path = self.source_dir / filename
            if not path.exists():
                logger.debug(f"Roscher index not found, skipping: {path}")
                continue

            df = pl.read_csv(
                path,
                separator="\t",
                infer_schema_length=0,
                quote_char=None,
                truncate_ragged_lines=True,
            )
            if "headword" not in df.columns or "subject_type" not in df.columns:
                logger.warning(f"{path}: missing headword/subject_type columns, skipped")
                continue

            df = df.filter(
                pl.col("headword").is_not_null() & pl.col("subject_type").is_in(list(ENTITY_TYPES))
            )
            for headword in df["headword"].to_list():
                name = clean_headword(headword)
                if name:
                    names.add(name)

        logger.info(f"Roscher: {len(names)} mythological names from {self.source_dir}")
        return names

    def lookup(self, tag: str) -> set[str]:
        if tag != PROVIDED_TAG:
            return set()
        if self._names is None:
            self._names = self._load()
        return set(self._names)
