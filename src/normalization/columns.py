# normalization/columns.py

"""
Résolution de colonnes par mots-clés.

Les titres de colonnes des boards sont libres et changent sans prévenir.
On associe chaque champ métier à une liste ordonnée de fragments :
la PREMIÈRE colonne du board (ordre du board) dont le titre contient
un des fragments gagne. Une seule colonne par champ, jamais de fusion.

Aucune colonne trouvée → None. L'appelant compte alors un manque
dans le DataQualityReport, on ne lève jamais d'exception ici.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class ColumnRule:
    field: str
    keywords: tuple[str, ...]


def find_column(column_map: dict[str, str], keywords: Iterable[str]) -> Optional[str]:
    """
    column_map : titre en minuscules → id de colonne
    keywords   : fragments recherchés (sous-chaîne, insensible à la casse)
    """
    fragments = [k.lower() for k in keywords if k]
    for title, column_id in column_map.items():
        title = title.lower()
        if any(fragment in title for fragment in fragments):
            return column_id
    return None


class ColumnResolver:
    """
    Stratégie explicite : un ensemble de règles nommées,
    injectable dans l'EntityMapper et testable sans réseau.
    """

    def __init__(self, rules: Iterable[ColumnRule]):
        self.rules = {rule.field: rule for rule in rules}

    def resolve(self, column_map: dict[str, str], field: str) -> Optional[str]:
        rule = self.rules.get(field)
        if rule is None:
            raise KeyError(f"Aucune règle de colonne pour le champ '{field}'")
        return find_column(column_map, rule.keywords)

    def resolve_all(self, column_map: dict[str, str]) -> dict[str, Optional[str]]:
        return {
            field: find_column(column_map, rule.keywords)
            for field, rule in self.rules.items()
        }


# ─────────────────────────────────────────
# RÈGLES PAR BOARD
# Ajouter un synonyme = ajouter un fragment ici
# ─────────────────────────────────────────

DEAL_RULES = (
    ColumnRule("deal_value",  ("value", "amount", "budget", "price")),
    ColumnRule("stage",       ("stage", "status")),
    ColumnRule("sector",      ("sector", "industry", "vertical")),
    ColumnRule("probability", ("probability", "confidence", "%")),
    ColumnRule("close_date",  ("close", "date", "timeline")),
    ColumnRule("owner",       ("owner", "person")),
)

WORK_ORDER_RULES = (
    ColumnRule("status",      ("execution status", "wo status", "invoice status")),
    ColumnRule("energy_type", ("nature of work", "type of work")),
    ColumnRule("start_date",  ("probable start", "start date")),
    ColumnRule("end_date",    ("probable end", "end date", "delivery date")),
)


def deal_resolver() -> ColumnResolver:
    return ColumnResolver(DEAL_RULES)


def work_order_resolver() -> ColumnResolver:
    return ColumnResolver(WORK_ORDER_RULES)
