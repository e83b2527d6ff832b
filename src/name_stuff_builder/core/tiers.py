"""サイズ別リスト（sm / lg / xl）の導出.

- sm: (frequency 降順, name 昇順・大文字小文字無視) で上位 SM_SIZE 件
- lg: 同じ並びで上位 max(SM_SIZE, ceil(件数 × LG_RATIO)) 件（件数で頭打ち）
- xl: 全件を name 昇順（frequency は無視）

同率は常に name（大文字小文字無視）の昇順で決めるため、何度生成してもバイト単位で同じ出力になる。
"""

from __future__ import annotations

import math
from enum import Enum
from fractions import Fraction

from .records import CultureDataset, NameRecord, sorted_records

SM_SIZE = 100
# float だと 0.33 * n が ceil を1つずらすことがあるので有理数で持つ
LG_RATIO = Fraction(33, 100)


class Tier(str, Enum):
    SM = "sm"
    LG = "lg"
    XL = "xl"


def popularity_key(record: NameRecord) -> tuple[int, str, str]:
    return (-record.frequency, record.key, record.name)


def by_popularity(dataset: CultureDataset) -> list[NameRecord]:
    return sorted(dataset.values(), key=popularity_key)


def tier_size(tier: Tier, total: int) -> int:
    """各 tier の件数.

    Examples:
        >>> tier_size(Tier.SM, 300)
        100
        >>> tier_size(Tier.LG, 1000)
        330
    """
    if tier is Tier.SM:
        return min(SM_SIZE, total)
    if tier is Tier.LG:
        return min(total, max(SM_SIZE, math.ceil(total * LG_RATIO)))
    return total


def generate_tier(dataset: CultureDataset, tier: Tier) -> list[NameRecord]:
    if tier is Tier.XL:
        return sorted_records(dataset)
    return by_popularity(dataset)[: tier_size(tier, len(dataset))]


def generate_tiers(dataset: CultureDataset) -> dict[Tier, list[NameRecord]]:
    return {tier: generate_tier(dataset, tier) for tier in Tier}
