"""Unit tests for the canonical store."""

from pathlib import Path

import pytest

from name_stuff_builder.core.exceptions import CanonicalStoreError
from name_stuff_builder.core.records import FamilyNameRecord, GivenNameRecord, NameType
from name_stuff_builder.core.store import CanonicalStore, render_dataset_file


class TestRenderDatasetFile:
    """render_dataset_file関数のテスト."""

    def test_given_header_and_sorted_records(self) -> None:
        dataset = {
            "zoe": GivenNameRecord("Zoe", "F", 9, frozenset({"modern"})),
            "anna": GivenNameRecord("Anna", "F", 12),
        }

        text = render_dataset_file(dataset, NameType.GIVEN, "en", sources="SSA")

        lines = text.splitlines()
        assert lines[0] == "# name-stuff given names for culture: en"
        assert "# format: name|gender|frequency|tags" in lines
        assert "# sources: SSA" in lines
        assert lines[-2:] == ["Anna|F|12|", "Zoe|F|9|modern"]
        assert text.endswith("\n")

    def test_family_header_has_no_gender_legend(self) -> None:
        text = render_dataset_file({"smith": FamilyNameRecord("Smith", 13)}, NameType.FAMILY, "en")
        assert "# gender:" not in text
        assert "# sources:" not in text
        assert text.splitlines()[-1] == "Smith|13|"


class TestCanonicalStore:
    """CanonicalStore クラスのテスト."""

    def test_save_and_load(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        dataset = {"thor": GivenNameRecord("Thor", "M", 9, frozenset({"mythological"}))}

        path = store.save("no", NameType.GIVEN, dataset, sources="Gender-C")

        assert path == tmp_path / "no" / "given.txt"
        assert store.load("no", NameType.GIVEN) == dataset
        assert store.read_sources("no", NameType.GIVEN) == "Gender-C"

    def test_save_keeps_existing_sources_line(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        store.save("en", NameType.FAMILY, {"smith": FamilyNameRecord("Smith", 13)}, sources="Census")

        store.save("en", NameType.FAMILY, {"jones": FamilyNameRecord("Jones", 12)})

        assert store.read_sources("en", NameType.FAMILY) == "Census"

    def test_load_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert CanonicalStore(tmp_path).load("xx", NameType.GIVEN) == {}

    def test_load_drops_malformed_and_folds_duplicates(self, tmp_path: Path) -> None:
        path = tmp_path / "de" / "given.txt"
        path.parent.mkdir()
        path.write_text("# header\nKarl|M|8|\nkarl|F|10|\nbad|line\n", encoding="utf-8")

        dataset = CanonicalStore(tmp_path).load("de", NameType.GIVEN)

        assert dataset == {"karl": GivenNameRecord("karl", "U", 10)}

    def test_save_rejects_wrong_record_type(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        with pytest.raises(ValueError, match="cannot be saved"):
            store.save("en", NameType.FAMILY, {"anna": GivenNameRecord("Anna", "F", 3)})

    def test_save_if_changed(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        dataset = {"smith": FamilyNameRecord("Smith", 13)}

        assert store.save_if_changed("en", NameType.FAMILY, dataset, dict(dataset)) is False
        assert not store.exists("en", NameType.FAMILY)
        assert store.save_if_changed("en", NameType.FAMILY, {}, dataset) is True
        assert store.exists("en", NameType.FAMILY)

    def test_written_with_lf_line_endings(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        path = store.save("en", NameType.FAMILY, {"smith": FamilyNameRecord("Smith", 13)})
        assert b"\r\n" not in path.read_bytes()

    def test_cultures_sorted(self, tmp_path: Path) -> None:
        for culture in ("fr", "de", "en"):
            (tmp_path / culture).mkdir()
        (tmp_path / "README.txt").write_text("not a culture", encoding="utf-8")

        assert CanonicalStore(tmp_path).cultures() == ["de", "en", "fr"]

    def test_cultures_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CanonicalStoreError, match="does not exist"):
            CanonicalStore(tmp_path / "missing").cultures()

    def test_cultures_root_is_file_raises(self, tmp_path: Path) -> None:
        root = tmp_path / "data"
        root.write_text("", encoding="utf-8")
        with pytest.raises(CanonicalStoreError, match="not a directory"):
            CanonicalStore(root).cultures()
