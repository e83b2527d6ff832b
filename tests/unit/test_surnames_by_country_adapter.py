"""Unit tests for the surnames-by-country adapter."""

from pathlib import Path

import pytest

from name_stuff_builder.adapters.surnames_by_country_adapter import SurnamesByCountryAdapter, rank_to_frequency
from name_stuff_builder.core.records import FamilyNameRecord


class TestRankToFrequency:
    """rank_to_frequency関数のテスト."""

    @pytest.mark.parametrize(("rank", "expected"), [(1, 13), (3, 13), (4, 12), (10, 11), (200, 2), (201, 1)])
    def test_buckets(self, rank: int, expected: int) -> None:
        assert rank_to_frequency(rank) == expected


class TestSurnamesByCountryAdapter:
    """SurnamesByCountryAdapter クラスのテスト."""

    @pytest.fixture
    def csv_path(self, tmp_path: Path) -> Path:
        path = tmp_path / "common-surnames-by-country.csv"
        content = (
            "Country,Rank,Romanized Name,Localized Name\n"
            "DE,1,Müller,Müller\n"
            "AT,2,Gruber,\n"
            "US,1,Smith,Smith\n"
            "JP,1,Sato,佐藤\n"
            "RU,1,,Иванов\n"
            "ZZ,1,Nobody,\n"
            "DE,x,Bad,\n"
        )
        path.write_bytes(b"\xef\xbb\xbf" + content.encode("utf-8"))
        return path

    def test_groups_by_culture(self, csv_path: Path) -> None:
        result = SurnamesByCountryAdapter(csv_path).read()

        assert sorted(result) == ["de", "japanese", "ru"]
        assert result["de"] == {
            "müller": FamilyNameRecord("Müller", 13),
            "gruber": FamilyNameRecord("Gruber", 13),
        }
        assert result["japanese"] == {"sato": FamilyNameRecord("Sato", 13)}

    def test_localized_name_is_fallback(self, csv_path: Path) -> None:
        assert SurnamesByCountryAdapter(csv_path).read()["ru"] == {"иванов": FamilyNameRecord("Иванов", 13)}

    def test_english_is_not_imported(self, csv_path: Path) -> None:
        assert "en" not in SurnamesByCountryAdapter(csv_path).read()

    def test_missing_rank_column_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.csv"
        path.write_text("Country,Name\nDE,Müller\n", encoding="utf-8")

        with pytest.raises(ValueError, match="missing column"):
            SurnamesByCountryAdapter(path).read()
