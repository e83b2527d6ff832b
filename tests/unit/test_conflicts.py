"""Unit tests for the gender conflict report."""

from pathlib import Path

import polars as pl

from name_stuff_builder.core.conflicts import export_gender_conflicts, gender_conflicts_frame
from name_stuff_builder.core.merge import GenderConflict


class TestGenderConflictReport:
    """gender 衝突レポートのテスト."""

    def test_frame_columns(self) -> None:
        df = gender_conflicts_frame([GenderConflict("jordan", "Jordan", "M", "F")], "en", "ssa")

        assert df.columns == ["culture", "source", "name", "existing", "incoming"]
        assert df.row(0) == ("en", "ssa", "Jordan", "M", "F")

    def test_export_sorted_tsv(self, tmp_path: Path) -> None:
        frames = [
            gender_conflicts_frame([GenderConflict("robin", "Robin", "F", "M")], "en", "ssa"),
            gender_conflicts_frame([GenderConflict("andrea", "Andrea", "F", "M")], "de", "gender-c"),
            gender_conflicts_frame([], "fr", "gender-c"),
        ]

        path = export_gender_conflicts(frames, tmp_path / "reports")

        assert path == tmp_path / "reports" / "gender_conflicts.tsv"
        df = pl.read_csv(path, separator="\t")
        assert df["name"].to_list() == ["Andrea", "Robin"]

    def test_no_conflicts_writes_nothing(self, tmp_path: Path) -> None:
        assert export_gender_conflicts([gender_conflicts_frame([], "en", "ssa")], tmp_path / "r") is None
        assert not (tmp_path / "r").exists()
