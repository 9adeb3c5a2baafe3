# connectors/base.py

from abc import ABC, abstractmethod
from dataclasses import dataclass

from models import RawBoard


class ConnectorError(RuntimeError):
    """Erreur côté source de données : fatale pour le fetch en cours."""


@dataclass
class FetchedBoards:
    deals: RawBoard
    work_orders: RawBoard


class BaseConnector(ABC):
    """
    Contrat que tous les connecteurs respectent.

    fetch_boards() renvoie les deux boards bruts (colonnes + items),
    sans aucune interprétation : le mapping est fait par EntityMapper.
    Toute erreur est levée en ConnectorError (ou sous-classe), jamais avalée.
    """

    def __init__(self, credentials: dict, timeout: float):
        self.credentials = credentials
        self.timeout     = timeout
        self.source_name = self._get_source_name()

    @abstractmethod
    def _get_source_name(self) -> str:
        pass

    @abstractmethod
    def connect(self) -> bool:
        pass

    @abstractmethod
    def fetch_boards(self) -> FetchedBoards:
        pass
