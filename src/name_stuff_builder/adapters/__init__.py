"""名前データ構築用のデータソースアダプタ群."""

from .base_adapter import BaseAdapter
from .census_adapter import CensusSurnamesAdapter
from .nam_dict_adapter import NamDictAdapter
from .roscher_lookup import RoscherLexiconLookup
from .ssa_adapter import SsaBabyNamesAdapter
from .surnames_by_country_adapter import SurnamesByCountryAdapter
from .wikidata_lookup import WikidataLookup

__all__ = [
    "BaseAdapter",
    "CensusSurnamesAdapter",
    "NamDictAdapter",
    "RoscherLexiconLookup",
    "SsaBabyNamesAdapter",
    "SurnamesByCountryAdapter",
    "WikidataLookup",
]
