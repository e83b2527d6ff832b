"""Unit tests for tier generation."""

from name_stuff_builder.core.records import FamilyNameRecord, GivenNameRecord
from name_stuff_builder.core.tiers import SM_SIZE, Tier, generate_tier, generate_tiers, tier_size


def _family_dataset(count: int) -> dict[str, FamilyNameRecord]:
    dataset = {}
    for i in range(count):
        name = f"Name{i:04d}"
        dataset[name.lower()] = FamilyNameRecord(name, (i % 13) + 1)
    return dataset


class TestTierSize:
    """tier_size関数のテスト."""

    def test_sm_is_capped(self) -> None:
        assert tier_size(Tier.SM, 300) == SM_SIZE
        assert tier_size(Tier.SM, 40) == 40

    def test_lg_sizing(self) -> None:
        assert tier_size(Tier.LG, 300) == 100  # ceil(99) < 100
        assert tier_size(Tier.LG, 1000) == 330
        assert tier_size(Tier.LG, 1001) == 331
        assert tier_size(Tier.LG, 50) == 50

    def test_lg_ratio_exact_multiple(self) -> None:
        assert tier_size(Tier.LG, 10000) == 3300

    def test_xl_is_everything(self) -> None:
        assert tier_size(Tier.XL, 12345) == 12345


class TestGenerateTiers:
    """generate_tier / generate_tiers のテスト."""

    def test_300_names(self) -> None:
        tiers = generate_tiers(_family_dataset(300))

        assert len(tiers[Tier.SM]) == 100
        assert len(tiers[Tier.LG]) == 100
        assert len(tiers[Tier.XL]) == 300

    def test_containment(self) -> None:
        dataset = _family_dataset(1000)
        tiers = generate_tiers(dataset)

        sm = {r.key for r in tiers[Tier.SM]}
        lg = {r.key for r in tiers[Tier.LG]}
        xl = {r.key for r in tiers[Tier.XL]}
        assert sm <= lg <= xl
        assert xl == set(dataset)

    def test_sm_is_most_frequent(self) -> None:
        tiers = generate_tiers(_family_dataset(500))
        sm_keys = {r.key for r in tiers[Tier.SM]}
        lowest_in_sm = min(r.frequency for r in tiers[Tier.SM])
        highest_outside = max(r.frequency for r in tiers[Tier.XL] if r.key not in sm_keys)
        assert lowest_in_sm >= highest_outside

    def test_ties_broken_by_name(self) -> None:
        dataset = {
            "bravo": GivenNameRecord("bravo", "U", 5),
            "alpha": GivenNameRecord("Alpha", "U", 5),
            "zulu": GivenNameRecord("Zulu", "U", 9),
        }

        ranked = generate_tier(dataset, Tier.SM)

        assert [r.name for r in ranked] == ["Zulu", "Alpha", "bravo"]

    def test_xl_ignores_frequency(self) -> None:
        dataset = {
            "zulu": GivenNameRecord("Zulu", "U", 13),
            "alpha": GivenNameRecord("Alpha", "U", 1),
        }
        assert [r.name for r in generate_tier(dataset, Tier.XL)] == ["Alpha", "Zulu"]

    def test_deterministic_regardless_of_insertion_order(self) -> None:
        dataset = _family_dataset(250)
        reversed_dataset = dict(reversed(list(dataset.items())))

        assert generate_tiers(dataset) == generate_tiers(reversed_dataset)

    def test_empty_dataset(self) -> None:
        assert all(records == [] for records in generate_tiers({}).values())
