# normalization/fields.py

import re
from datetime import datetime, timezone
from typing import Optional


# Tout ce qui n'est pas chiffre, point ou signe moins disparaît
_NON_NUMERIC = re.compile(r"[^0-9.\-]+")

# Plus long préfixe décimal valide : "1.2.3" → "1.2", "12-3" → "12"
_DECIMAL_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

# Ordre important : "high" est testé avant "low"
PROBABILITY_LABELS = (
    ("high", 90),
    ("medium", 50),
    ("low", 20),
)


def parse_number(value) -> float:
    """
    Montants et nombres saisis à la main.

    "$12,500.50" → 12500.5
    "12.5k"      → 12.5   (le "k" est retiré, pas interprété)
    "N/A", ""    → 0
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not value:
        return 0.0

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _DECIMAL_PREFIX.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_probability(value) -> int:
    """
    Probabilité d'un deal, toujours un entier dans [0, 100].
    Accepte les libellés qualitatifs (High / Medium / Low) et les pourcentages.
    """
    text = normalize_text(value if isinstance(value, str) else str(value or ""))
    lowered = text.lower()

    for label, probability in PROBABILITY_LABELS:
        if label in lowered:
            return probability

    number = parse_number(text.replace("%", ""))
    # arrondi au demi supérieur : "50.5%" → 51
    return int(min(max(number, 0.0), 100.0) + 0.5)


def normalize_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_date(value) -> str:
    # monday renvoie déjà des dates ISO (YYYY-MM-DD), triables telles quelles
    if not value:
        return ""
    return str(value)


# Formats acceptés quand fromisoformat refuse (anciens interpréteurs)
_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def parse_date(value) -> Optional[datetime]:
    """
    Parse une date opaque pour les comparaisons (règle de retard).
    Retourne un datetime UTC aware, ou None si illisible.

    Gère :
    → YYYY-MM-DD (minuit UTC)
    → ISO 8601 avec Z ou offset
    → YYYY-MM-DD HH:MM[:SS] (colonnes date monday avec heure)
    """
    if not value:
        return None

    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip().replace("Z", "+00:00")
        dt = _parse_date_text(s)
        if dt is None:
            return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_date_text(s: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None
