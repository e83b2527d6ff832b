"""Wikidata SPARQL による出典照合（mythological / biblical）.

タグごとに Wikidata のクラス（Q番号）を問い合わせ、英語ラベルが1語の項目を名前として集める。
問い合わせ失敗は警告を出してそのクエリを空集合として扱う（タグ付けの網羅率が下がるだけで処理は続ける）。
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from typing import Any

import httpx
from loguru import logger

WIKIDATA_ENDPOINT = "https://query.wikidata.org/sparql"
USER_AGENT = "name-stuff-builder/0.1 (https://github.com/JohnCrafton/name-stuff)"

# tag → {ラベル: Q番号}
QUERIES: dict[str, dict[str, str]] = {
    "mythological": {
        "Greek deity": "Q22989102",
        "Roman deity": "Q21070568",
        "Norse deity": "Q16513881",
        "Egyptian deity": "Q21070598",
        "Hindu deity": "Q14933824",
        "Celtic deity": "Q1475995",
        "Mesopotamian deity": "Q80071927",
        "Japanese deity": "Q25437922",
        "Chinese deity": "Q18576316",
        "Greek mythological figure": "Q22988604",
        "Greek mythological hero": "Q41573",
    },
    "biblical": {
        "biblical figure": "Q20643955",
        "person in the Bible": "Q51070155",
        "character in the Hebrew Bible": "Q4184426",
    },
}

_UNUSABLE_LABEL = re.compile(r"[0-9()\[\]/]")


def build_query(q_number: str, limit: int = 500) -> str:
    return f"""SELECT DISTINCT ?item ?itemLabel WHERE {{
  ?item wdt:P31/wdt:P279* wd:{q_number} .
  ?item rdfs:label ?itemLabel .
  FILTER(LANG(?itemLabel) = "en")
  FILTER(!CONTAINS(?itemLabel, " "))
  FILTER(STRLEN(?itemLabel) >= 2)
  FILTER(STRLEN(?itemLabel) <= 20)
}}
LIMIT {limit}
"""


def extract_names(response: dict[str, Any] | None) -> list[str]:
    """SPARQL JSON 応答からラベルを取り出す（数字・括弧・スラッシュを含むものは除外、重複除去）."""
    if not response:
        return []
    bindings = response.get("results", {}).get("bindings", [])

    names: list[str] = []
    seen: set[str] = set()
    for binding in bindings:
        label = binding.get("itemLabel", {}).get("value")
        if not label or _UNUSABLE_LABEL.search(label):
            continue
        label = label.strip()
        if label and label not in seen:
            seen.add(label)
            names.append(label)
    return names


class WikidataLookup:
    """Wikidata SPARQL エンドポイントを使う ProvenanceLookup.

    Args:
        client: 共有する httpx.Client（None の場合は内部で作成）
        endpoint: SPARQL エンドポイント URL
        delay: クエリ間の待ち時間（秒）。サーバ負荷を避けるため
        queries: tag → {ラベル: Q番号}（既定は QUERIES）
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        endpoint: str = WIKIDATA_ENDPOINT,
        delay: float = 1.0,
        timeout: float = 60.0,
        queries: dict[str, dict[str, str]] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.endpoint = endpoint
        self.delay = delay
        self.queries = queries if queries is not None else QUERIES
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def __enter__(self) -> WikidataLookup:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def execute_query(self, query: str) -> dict[str, Any] | None:
        """SPARQL クエリを実行する。失敗時は None（警告のみ）."""
        try:
            response = self._client.get(
                self.endpoint,
                params={"query": query, "format": "json"},
                headers={"User-Agent": USER_AGENT, "Accept": "application/sparql-results+json"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Wikidata query failed with status {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Wikidata query error: {e}")
        except ValueError as e:
            logger.warning(f"Wikidata returned invalid JSON: {e}")
        return None

    def lookup(self, tag: str) -> set[str]:
        names: set[str] = set()
        categories = self.queries.get(tag, {})
        for i, (label, q_number) in enumerate(categories.items()):
            if i > 0 and self.delay > 0:
                self._sleep(self.delay)
            found = extract_names(self.execute_query(build_query(q_number)))
            logger.info(f"[Wikidata] {tag}: {label} ({q_number}) -> {len(found)} names")
            names.update(found)
        return names
