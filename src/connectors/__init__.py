# connectors/__init__.py

"""
Factory centralisée pour les connecteurs de données.

Utilisation :
    from connectors import get_connector

    connector = get_connector("monday", settings)
    boards = connector.fetch_boards()

Un seul endroit à modifier si une source change de nom.
"""

import importlib
import logging

from config import Settings
from connectors.base import BaseConnector

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────
# MAP : nom source → classe connecteur
# Ajouter une source = ajouter une ligne ici
# ─────────────────────────────────────────

_CONNECTOR_MAP = {
    "monday": ("connectors.monday", "MondayConnector"),
}

DEFAULT_SOURCE = "monday"


def get_connector(source: str, settings: Settings) -> BaseConnector:
    """
    Instancie le connecteur d'une source à partir de la config.

    Lève ValueError si la source est inconnue,
    ConfigError si la config de la source est incomplète.
    """
    entry = _CONNECTOR_MAP.get(source.lower())
    if not entry:
        raise ValueError(f"Source de données inconnue : {source}")

    module_path, class_name = entry
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls.from_settings(settings)


def list_supported_sources() -> list[str]:
    return list(_CONNECTOR_MAP.keys())
