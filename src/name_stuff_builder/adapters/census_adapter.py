"""US Census 2010 surnames（Names_2010Census.csv）アダプタ."""

from __future__ import annotations

import math
import re
from pathlib import Path

import polars as pl
from loguru import logger

from name_stuff_builder.core.merge import aggregate_records
from name_stuff_builder.core.records import MAX_FREQUENCY, MIN_FREQUENCY, CultureDataset, FamilyNameRecord, NameType

from .base_adapter import BaseAdapter

_WORD_START = re.compile(r"\b\w")
_MC_PREFIX = re.compile(r"\bMc(\w)")


def prop100k_to_frequency(prop100k: float | None) -> int:
    """10万人あたりの出現数 → frequency（log スケールで 1-13）.

    Examples:
        >>> prop100k_to_frequency(None)
        1
        >>> prop100k_to_frequency(828.19)
        13
    """
    if prop100k is None or prop100k <= 0:
        return MIN_FREQUENCY
    scaled = math.floor(math.log10(prop100k + 1) * 4.5 + 0.5)
    return min(max(scaled, MIN_FREQUENCY), MAX_FREQUENCY)


def title_case(name: str) -> str:
    """SMITH → Smith, MCDONALD → McDonald, O'BRIEN → O'Brien."""
    result = _WORD_START.sub(lambda m: m.group(0).upper(), name.lower())
    return _MC_PREFIX.sub(lambda m: "Mc" + m.group(1).upper(), result)


class CensusSurnamesAdapter(BaseAdapter):
    """Census の surname CSV（name, prop100k 列）を読むアダプタ.

    Args:
        file_path: CSV ファイルのパス
        culture: 出力先カルチャー（通常 "en"）
    """

    name_type = NameType.FAMILY

    def __init__(self, file_path: Path | str, culture: str = "en") -> None:
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Census surname CSV not found: {self.file_path}")
        self.culture = culture

    def read(self) -> dict[str, CultureDataset]:
        try:
            df = pl.read_csv(self.file_path, infer_schema_length=0, truncate_ragged_lines=True)
        except Exception as e:
            raise ValueError(f"Failed to read CSV: {self.file_path}") from e

        missing = {"name", "prop100k"} - set(df.columns)
        if missing:
            raise ValueError(f"{self.file_path}: missing column(s) {sorted(missing)}")

        # "(S)"（秘匿値）などの数値でない prop100k は null → frequency 1
        df = df.select(
            pl.col("name").str.strip_chars(),
            pl.col("prop100k").cast(pl.Float64, strict=False),
        ).filter(pl.col("name").is_not_null() & (pl.col("name") != ""))

        records = [
            FamilyNameRecord(title_case(row["name"]), prop100k_to_frequency(row["prop100k"]))
            for row in df.iter_rows(named=True)
        ]
        logger.info(f"Census: parsed {len(records)} surnames from {self.file_path}")
        return {self.culture: aggregate_records(records)}
