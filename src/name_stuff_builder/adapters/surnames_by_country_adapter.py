"""popular-names-by-country（common-surnames-by-country.csv）アダプタ.

国コードをカルチャーに寄せ、順位を frequency に変換する。
en は Census の方が情報量が多いのでこのソースからは取り込まない。
"""

from __future__ import annotations

import io
from pathlib import Path

import polars as pl
from loguru import logger

from name_stuff_builder.core.merge import aggregate_records
from name_stuff_builder.core.records import CultureDataset, FamilyNameRecord, NameType

from .base_adapter import BaseAdapter

COUNTRY_TO_CULTURE = {
    "AM": "caucasus",
    "AZ": "caucasus",
    "GE": "caucasus",
    "AT": "de",
    "DE": "de",
    "CH": "de",
    "BE": "fr",
    "FR": "fr",
    "LU": "fr",
    "GB": "en",
    "IE": "en",
    "US": "en",
    "AU": "en",
    "CA": "en",
    "NZ": "en",
    "ES": "es",
    "MX": "es",
    "AR": "es",
    "CO": "es",
    "IT": "it",
    "PT": "pt",
    "BR": "pt",
    "NL": "nl",
    "PL": "pl",
    "RU": "ru",
    "UA": "ru",
    "BY": "ru",
    "DK": "nordic",
    "FI": "nordic",
    "IS": "nordic",
    "NO": "nordic",
    "SE": "nordic",
    "EE": "baltic",
    "LT": "baltic",
    "LV": "baltic",
    "CZ": "slavic",
    "SK": "slavic",
    "HU": "slavic",
    "RO": "slavic",
    "BG": "slavic",
    "HR": "slavic",
    "RS": "slavic",
    "SI": "slavic",
    "BA": "slavic",
    "MK": "slavic",
    "ME": "slavic",
    "XK": "slavic",
    "GR": "greek",
    "CY": "greek",
    "AL": "albanian",
    "TR": "turkic",
    "KZ": "turkic",
    "IL": "hebrew",
    "SA": "arab",
    "AE": "arab",
    "EG": "arab",
    "IR": "arab",
    "IQ": "arab",
    "SY": "arab",
    "JO": "arab",
    "LB": "arab",
    "CN": "chinese",
    "TW": "chinese",
    "HK": "chinese",
    "SG": "chinese",
    "IN": "indian",
    "PK": "indian",
    "BD": "indian",
    "LK": "indian",
    "NP": "indian",
    "JP": "japanese",
    "KR": "korean",
    "KP": "korean",
    "VN": "vietnamese",
    "PH": "other",
    "ID": "other",
    "MY": "other",
    "TH": "other",
}

SKIPPED_CULTURES = frozenset({"en"})

# 順位の上限（以下）→ frequency。最後を超えたら 1
_RANK_TO_FREQUENCY = (
    (3, 13),
    (5, 12),
    (10, 11),
    (15, 10),
    (20, 9),
    (30, 8),
    (40, 7),
    (50, 6),
    (75, 5),
    (100, 4),
    (150, 3),
    (200, 2),
)


def _blank_to_null(column: str) -> pl.Expr:
    stripped = pl.col(column).str.strip_chars()
    return pl.when(stripped == "").then(None).otherwise(stripped)


def rank_to_frequency(rank: int) -> int:
    for upper, frequency in _RANK_TO_FREQUENCY:
        if rank <= upper:
            return frequency
    return 1


class SurnamesByCountryAdapter(BaseAdapter):
    """国別 surname CSV（Country, Rank, Romanized Name, Localized Name）を読むアダプタ."""

    name_type = NameType.FAMILY

    def __init__(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Surnames-by-country CSV not found: {self.file_path}")

    def read(self) -> dict[str, CultureDataset]:
        # BOM 付きで配布されているため utf-8-sig で読んでから渡す
        text = self.file_path.read_bytes().decode("utf-8-sig")
        df = pl.read_csv(io.BytesIO(text.encode("utf-8")), infer_schema_length=0, truncate_ragged_lines=True)

        missing = {"Country", "Rank"} - set(df.columns)
        if missing:
            raise ValueError(f"{self.file_path}: missing column(s) {sorted(missing)}")

        for column in ("Romanized Name", "Localized Name"):
            if column not in df.columns:
                df = df.with_columns(pl.lit(None, dtype=pl.String).alias(column))

        df = df.with_columns(
            pl.col("Country").str.strip_chars().replace_strict(COUNTRY_TO_CULTURE, default=None).alias("culture"),
            pl.col("Rank").cast(pl.Int64, strict=False).alias("rank"),
            # 英字表記を優先し、無ければ現地表記
            pl.coalesce(_blank_to_null("Romanized Name"), _blank_to_null("Localized Name")).alias("surname"),
        ).filter(
            pl.col("culture").is_not_null()
            & ~pl.col("culture").is_in(list(SKIPPED_CULTURES))
            & pl.col("rank").is_not_null()
            & pl.col("surname").is_not_null()
        )

        by_culture: dict[str, list[FamilyNameRecord]] = {}
        for row in df.iter_rows(named=True):
            by_culture.setdefault(row["culture"], []).append(
                FamilyNameRecord(row["surname"], rank_to_frequency(row["rank"]))
            )

        result = {culture: aggregate_records(records) for culture, records in sorted(by_culture.items())}
        for culture, dataset in result.items():
            logger.info(f"Surnames-by-country: {culture}: {len(dataset)} surnames")
        return result
