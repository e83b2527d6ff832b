"""Unit tests for build config loading."""

from pathlib import Path

import pytest

from name_stuff_builder.config import load_build_config
from name_stuff_builder.core.exceptions import SourceConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sources.yml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadBuildConfig:
    """load_build_config関数のテスト."""

    def test_full_config(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
data_dir: data
report_dir: reports
sources:
  - id: ssa
    kind: ssa
    culture: en
    path: sources/ssa
    label: US SSA
  - id: gender-c
    kind: nam_dict
    path: /abs/nam_dict.txt
    enabled: false
provenance:
  - id: roscher
    kind: roscher
    path: sources/roscher
  - id: wikidata
    kind: wikidata
    tags: [biblical]
""",
        )

        config = load_build_config(path)

        assert config.data_dir == tmp_path / "data"
        assert config.lists_dir == tmp_path / "lists"
        assert config.skips_file == tmp_path / "skips" / "skips.txt"
        assert config.report_dir == tmp_path / "reports"

        ssa, gender_c = config.sources
        assert ssa.path == tmp_path / "sources" / "ssa"
        assert ssa.culture == "en"
        assert ssa.display_label == "US SSA"
        assert gender_c.path == Path("/abs/nam_dict.txt")
        assert gender_c.enabled is False
        assert gender_c.display_label == "gender-c"

        roscher, wikidata = config.provenance
        assert roscher.tags == ("mythological",)
        assert roscher.path == tmp_path / "sources" / "roscher"
        assert wikidata.tags == ("biblical",)
        assert wikidata.path is None

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_build_config(_write(tmp_path, ""))
        assert config.sources == ()
        assert config.provenance == ()
        assert config.report_dir is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_build_config(tmp_path / "absent.yml")

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("sources: [\n", "invalid YAML"),
            ("- just\n- a list\n", "top level"),
            ("sources:\n  - id: x\n    kind: unknown\n    path: p\n", "unknown kind"),
            ("sources:\n  - id: x\n    kind: ssa\n    path: p\n", "requires 'culture'"),
            ("sources:\n  - id: x\n    kind: nam_dict\n", "missing required key 'path'"),
            (
                "sources:\n  - {id: x, kind: nam_dict, path: a}\n  - {id: x, kind: nam_dict, path: b}\n",
                "duplicate source",
            ),
            ("provenance:\n  - id: r\n    kind: roscher\n", "requires 'path'"),
            ("provenance:\n  - id: w\n    kind: wikidata\n    tags: [fantasy]\n", "tag vocabulary"),
            ("provenance:\n  - id: r\n    kind: roscher\n    path: p\n    tags: [biblical]\n", "cannot provide"),
        ],
    )
    def test_invalid_config(self, tmp_path: Path, text: str, message: str) -> None:
        with pytest.raises(SourceConfigError, match=message):
            load_build_config(_write(tmp_path, text))
