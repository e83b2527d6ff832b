"""US SSA Baby Names（yob*.txt）アダプタ.

年別ファイル `yobYYYY.txt`（name,sex,count）を集計し、given name レコードを作る。

- frequency: 総出現数を 1-13 のバケットに割り当てる
- gender: 男性比率で M / M? / U / F? / F を決める
- era タグ: 出現数が最大の年代（中央年）から vintage / classic / modern を決める（classic はタグにしない）
- 総出現数が MIN_TOTAL_COUNT 未満の名前は捨てる
"""

from __future__ import annotations

import bisect
import re
from pathlib import Path

import polars as pl
from loguru import logger

from name_stuff_builder.core.records import NEUTRAL_ERA, CultureDataset, GivenNameRecord, NameType

from .base_adapter import BaseAdapter

MIN_TOTAL_COUNT = 100
FIRST_YEAR = 1880

# (開始年, 終了年, era)。modern は上限なし
ERAS = (
    (1880, 1940, "vintage"),
    (1941, 1979, NEUTRAL_ERA),
    (1980, None, "modern"),
)

# 総出現数の上限（以下）→ frequency。最後のバケットを超えたら 13
_FREQUENCY_BOUNDS = [
    100,
    500,
    1_000,
    5_000,
    10_000,
    50_000,
    100_000,
    250_000,
    500_000,
    1_000_000,
    2_000_000,
    4_000_000,
]

_YEAR_FILE = re.compile(r"^yob(\d{4})\.txt$")


def count_to_frequency(total: int) -> int:
    """総出現数 → frequency（1-13、対数的なバケット）.

    Examples:
        >>> count_to_frequency(100)
        1
        >>> count_to_frequency(101)
        2
        >>> count_to_frequency(5_000_000)
        13
    """
    return bisect.bisect_left(_FREQUENCY_BOUNDS, total) + 1


def determine_gender(male: int, female: int) -> str:
    total = male + female
    if total == 0:
        return "U"

    male_ratio = male / total
    if male_ratio > 0.95:
        return "M"
    if male_ratio > 0.75:
        return "M?"
    if male_ratio > 0.25:
        return "U"
    if male_ratio > 0.05:
        return "F?"
    return "F"


def era_for_decade(decade: int) -> str | None:
    """年代（1950 など）の中央年から era を返す（範囲外は None）."""
    year = decade + 5
    for start, end, era in ERAS:
        if year >= start and (end is None or year <= end):
            return era
    return None


class SsaBabyNamesAdapter(BaseAdapter):
    """SSA の年別ファイル群を1カルチャー分の given name に集計するアダプタ.

    Args:
        source_dir: yob*.txt を含むディレクトリ
        culture: 出力先カルチャー（通常 "en"）
    """

    name_type = NameType.GIVEN

    def __init__(self, source_dir: Path | str, culture: str = "en") -> None:
        self.source_dir = Path(source_dir)
        if not self.source_dir.is_dir():
            raise FileNotFoundError(f"SSA source directory not found: {self.source_dir}")
        self.culture = culture

    def _year_files(self) -> list[tuple[int, Path]]:
        files: list[tuple[int, Path]] = []
        for path in sorted(self.source_dir.glob("yob*.txt")):
            m = _YEAR_FILE.match(path.name)
            if m and int(m.group(1)) >= FIRST_YEAR:
                files.append((int(m.group(1)), path))
        return files

    def _read_counts(self) -> pl.DataFrame:
        """全年のファイルを (year, name, sex, count) の1表にまとめる."""
        frames: list[pl.DataFrame] = []
        for year, path in self._year_files():
            df = pl.read_csv(
                path,
                has_header=False,
                schema={"name": pl.String, "sex": pl.String, "count": pl.String},
                truncate_ragged_lines=True,
                quote_char=None,
            )
            # フィールド不足・数値でない count の行は捨てる
            df = (
                df.with_columns(pl.col("count").cast(pl.Int64, strict=False))
                .drop_nulls(["name", "sex", "count"])
                .with_columns(
                    pl.col("name").str.strip_chars(),
                    pl.col("sex").str.strip_chars(),
                    pl.lit(year).alias("year"),
                )
                .filter(pl.col("name") != "")
            )
            frames.append(df.select(["year", "name", "sex", "count"]))

        if not frames:
            return pl.DataFrame(
                schema={"year": pl.Int32, "name": pl.String, "sex": pl.String, "count": pl.Int64}
            )
        return pl.concat(frames, how="vertical_relaxed")

    def read(self) -> dict[str, CultureDataset]:
        counts = self._read_counts()
        if counts.is_empty():
            logger.warning(f"No SSA year files found in {self.source_dir}")
            return {self.culture: {}}

        counts = counts.with_row_index("row").with_columns(
            pl.col("name").str.to_lowercase().alias("key"),
            ((pl.col("year") // 10) * 10).alias("decade"),
        )

        # 表示用 name は最初に現れた表記（年順・ファイル内の行順）
        totals = (
            counts.sort(["year", "row"])
            .group_by("key", maintain_order=True)
            .agg(
                pl.col("name").first(),
                pl.col("count").sum().alias("total"),
                pl.col("count").filter(pl.col("sex") == "M").sum().alias("male"),
                pl.col("count").filter(pl.col("sex") == "F").sum().alias("female"),
            )
            .filter(pl.col("total") >= MIN_TOTAL_COUNT)
        )

        # 出現数が最大の年代（同数なら古い年代）
        peaks = (
            counts.group_by(["key", "decade"])
            .agg(pl.col("count").sum().alias("decade_total"))
            .sort(["key", "decade_total", "decade"], descending=[False, True, False])
            .group_by("key", maintain_order=True)
            .agg(pl.col("decade").first().alias("peak_decade"))
        )

        rows = totals.join(peaks, on="key", how="left").sort("key")

        dataset: CultureDataset = {}
        for row in rows.iter_rows(named=True):
            era = era_for_decade(row["peak_decade"]) if row["peak_decade"] is not None else None
            tags = frozenset({era}) if era and era != NEUTRAL_ERA else frozenset()
            dataset[row["key"]] = GivenNameRecord(
                name=row["name"],
                gender=determine_gender(row["male"] or 0, row["female"] or 0),
                frequency=count_to_frequency(row["total"]),
                tags=tags,
            )

        logger.info(
            f"SSA: {counts['key'].n_unique()} unique names, "
            f"{len(dataset)} meet minimum count ({MIN_TOTAL_COUNT})"
        )
        return {self.culture: dataset}
