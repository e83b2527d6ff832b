"""Integration test: sources.yml → canonical store → tagged → derived lists."""

from pathlib import Path

import pytest

from name_stuff_builder.builder import build_canonical
from name_stuff_builder.config import load_build_config
from name_stuff_builder.core.annotate import StaticLookup
from name_stuff_builder.core.formatter import ALL_VARIANTS
from name_stuff_builder.core.records import NameType
from name_stuff_builder.core.skips import load_skips
from name_stuff_builder.core.store import CanonicalStore
from name_stuff_builder.generate import generate_lists


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ssa = tmp_path / "sources" / "ssa"
    ssa.mkdir(parents=True)
    (ssa / "yob1925.txt").write_text("Thor,M,150\nEdna,F,900\n", encoding="utf-8")
    (ssa / "yob1995.txt").write_text("Adolf,M,400\nJosé,M,300\nJose,M,200\nEve,F,700\n", encoding="utf-8")

    census = tmp_path / "sources" / "Names_2010Census.csv"
    census.write_text("name,rank,count,prop100k\nSMITH,1,2442977,828.19\nNGUYỄN,2,1,12.5\n", encoding="utf-8")

    skips = tmp_path / "skips" / "skips.txt"
    skips.parent.mkdir()
    skips.write_text("# skip list\nAdolf|OFFENSIVE\n", encoding="utf-8")

    (tmp_path / "sources.yml").write_text(
        """
data_dir: data
lists_dir: lists
report_dir: reports
sources:
  - id: ssa
    kind: ssa
    culture: en
    path: sources/ssa
    label: US SSA
  - id: census
    kind: census_surnames
    culture: en
    path: sources/Names_2010Census.csv
  - id: missing
    kind: nam_dict
    path: sources/nam_dict.txt
provenance:
  - id: wikidata
    kind: wikidata
    tags: [mythological, biblical]
""",
        encoding="utf-8",
    )
    return tmp_path


@pytest.mark.integration
class TestBuildWorkflow:
    """取り込み → タグ付け → 派生リスト生成の通しテスト."""

    def test_end_to_end(self, workspace: Path) -> None:
        config = load_build_config(workspace / "sources.yml")
        lookups = {"wikidata": StaticLookup({"mythological": ["Thor"], "biblical": ["Eve", "Adam"]})}

        effects = build_canonical(config, lookups=lookups)

        assert {(e.source, e.culture) for e in effects} == {("ssa", "en"), ("census", "en")}

        store = CanonicalStore(config.data_dir)
        given = store.load("en", NameType.GIVEN)
        assert given["thor"].tags == frozenset({"mythological", "vintage"})
        assert given["eve"].tags == frozenset({"biblical", "modern"})
        assert store.read_sources("en", NameType.GIVEN) == "US SSA"
        assert store.read_sources("en", NameType.FAMILY) == "census"

        skips = load_skips(config.skips_file)
        generate_lists(store, config.lists_dir, skips, variants=ALL_VARIANTS)

        en_dir = config.lists_dir / "en"
        assert len(list(en_dir.iterdir())) == 24
        for path in en_dir.iterdir():
            assert "Adolf" not in path.read_text(encoding="utf-8")

        ascii_given = (en_dir / "given_xl_raw_ascii.txt").read_text(encoding="utf-8").splitlines()
        assert ascii_given == ["Edna", "Eve", "Jose", "Thor"]
        ascii_family = (en_dir / "family_xl_raw_ascii.txt").read_text(encoding="utf-8").splitlines()
        assert ascii_family == ["Smith"]

    def test_rebuild_is_stable(self, workspace: Path) -> None:
        config = load_build_config(workspace / "sources.yml")
        lookups = {"wikidata": StaticLookup({"mythological": ["Thor"]})}

        build_canonical(config, lookups=lookups)
        path = CanonicalStore(config.data_dir).path_for("en", NameType.GIVEN)
        first = path.read_bytes()
        effects = build_canonical(config, lookups=lookups)

        assert path.read_bytes() == first
        assert not any(e.written for e in effects)
        assert not (config.report_dir / "gender_conflicts.tsv").exists()
