"""Unit tests for the canonical store builder."""

from pathlib import Path

import polars as pl

from name_stuff_builder.adapters.base_adapter import BaseAdapter
from name_stuff_builder.builder import _append_source_label, merge_source, tag_store
from name_stuff_builder.config import BuildConfig, ProvenanceSpec
from name_stuff_builder.core.annotate import StaticLookup
from name_stuff_builder.core.records import CultureDataset, GivenNameRecord, NameType
from name_stuff_builder.core.store import CanonicalStore


class _StubAdapter(BaseAdapter):
    name_type = NameType.GIVEN

    def __init__(self, data: dict[str, CultureDataset]) -> None:
        self.data = data

    def read(self) -> dict[str, CultureDataset]:
        return self.data


class TestAppendSourceLabel:
    """_append_source_label関数のテスト."""

    def test_append(self) -> None:
        assert _append_source_label(None, "SSA") == "SSA"
        assert _append_source_label("gender.c", "SSA") == "gender.c + SSA"

    def test_existing_label_is_not_duplicated(self) -> None:
        assert _append_source_label("gender.c + SSA", "SSA") == "gender.c + SSA"


class TestMergeSource:
    """merge_source関数のテスト."""

    def test_merges_into_store(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        store.save("en", NameType.GIVEN, {"thor": GivenNameRecord("Thor", "M", 4, frozenset({"mythological"}))})
        adapter = _StubAdapter(
            {
                "en": {"thor": GivenNameRecord("Thor", "M", 9), "robin": GivenNameRecord("Robin", "F", 6)},
                "de": {"karl": GivenNameRecord("Karl", "M", 8)},
                "fr": {},
            }
        )
        frames: list[pl.DataFrame] = []

        effects = merge_source(store, adapter, "ssa", label="US SSA", conflict_frames=frames)

        assert [(e.culture, e.added, e.updated, e.written) for e in effects] == [
            ("de", 1, 0, True),
            ("en", 1, 1, True),
        ]
        assert store.load("en", NameType.GIVEN)["thor"] == GivenNameRecord(
            "Thor", "M", 9, frozenset({"mythological"})
        )
        assert store.read_sources("en", NameType.GIVEN) == "US SSA"
        assert not store.exists("fr", NameType.GIVEN)
        assert frames == []

    def test_gender_conflicts_are_collected(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        store.save("en", NameType.GIVEN, {"robin": GivenNameRecord("Robin", "F", 6)})
        frames: list[pl.DataFrame] = []

        effects = merge_source(
            store, _StubAdapter({"en": {"robin": GivenNameRecord("Robin", "M", 6)}}), "ssa", conflict_frames=frames
        )

        assert effects[0].gender_conflicts == 1
        assert len(frames) == 1
        assert frames[0]["incoming"].to_list() == ["M"]
        assert store.load("en", NameType.GIVEN)["robin"].gender == "U"

    def test_rerun_does_not_rewrite(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path)
        adapter = _StubAdapter({"en": {"anna": GivenNameRecord("Anna", "F", 12)}})

        merge_source(store, adapter, "ssa")
        effects = merge_source(store, adapter, "ssa")

        assert effects[0].written is False


class TestTagStore:
    """tag_store関数のテスト（照合ソースを差し替え）."""

    def test_tags_with_injected_lookups(self, tmp_path: Path) -> None:
        store = CanonicalStore(tmp_path / "data")
        store.save("en", NameType.GIVEN, {"eve": GivenNameRecord("Eve", "F", 8)})
        store.save("de", NameType.GIVEN, {"thor": GivenNameRecord("Thor", "M", 5)})
        config = BuildConfig(
            data_dir=tmp_path / "data",
            lists_dir=tmp_path / "lists",
            skips_file=None,
            provenance=(
                ProvenanceSpec(id="wikidata", kind="wikidata", tags=("biblical",)),
                ProvenanceSpec(id="roscher", kind="roscher", tags=("mythological",), path=tmp_path / "absent"),
                ProvenanceSpec(id="off", kind="wikidata", tags=("mythological",), enabled=False),
            ),
        )
        lookups = {
            "wikidata": StaticLookup({"biblical": ["Eve"]}),
            "roscher": StaticLookup({"mythological": ["Thor"]}),
        }

        tagged = tag_store(config, lookups=lookups, cultures=["en"])

        assert tagged == {"en": 1}
        assert store.load("en", NameType.GIVEN)["eve"].tags == frozenset({"biblical"})
        assert store.load("de", NameType.GIVEN)["thor"].tags == frozenset()

    def test_no_enabled_provenance(self, tmp_path: Path) -> None:
        config = BuildConfig(data_dir=tmp_path, lists_dir=tmp_path / "lists", skips_file=None)
        assert tag_store(config) == {}
