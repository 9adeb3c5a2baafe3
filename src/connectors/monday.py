# connectors/monday.py

import json
import logging
from typing import Optional

import requests

from config import Settings
from models import RawBoard
from connectors.base import BaseConnector, ConnectorError, FetchedBoards

logger = logging.getLogger(__name__)

MONDAY_API_URL = "https://api.monday.com/v2"

# Une seule requête GraphQL : colonnes ET items des deux boards
BOARDS_QUERY = """query {
  deals: boards(ids: [%(deals)d]) {
    columns { id title }
    items_page(limit: %(limit)d) { items { id name column_values { id text } } }
  }
  work_orders: boards(ids: [%(work_orders)d]) {
    columns { id title }
    items_page(limit: %(limit)d) { items { id name column_values { id text } } }
  }
}"""

ME_QUERY = "query { me { id } }"


class MondayAPIError(ConnectorError):
    pass


class MondayConnector(BaseConnector):

    def __init__(
        self,
        api_key: str,
        deals_board_id: int,
        work_orders_board_id: int,
        timeout: float = 30,
        items_limit: int = 500,
    ):
        super().__init__({"api_key": api_key}, timeout)
        self.deals_board_id = deals_board_id
        self.work_orders_board_id = work_orders_board_id
        self.items_limit = items_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "MondayConnector":
        """Lève ConfigError si la clé API ou un board id manque."""
        api_key = settings.require_monday_key()
        deals_id, work_orders_id = settings.board_ids()
        return cls(
            api_key,
            deals_id,
            work_orders_id,
            timeout=settings.monday_timeout_seconds,
            items_limit=settings.items_limit,
        )

    def _get_source_name(self) -> str:
        return "monday"

    def _get_headers(self) -> dict:
        # monday attend la clé brute, sans "Bearer"
        return {
            "Content-Type": "application/json",
            "Authorization": self.credentials["api_key"],
        }

    # ─────────────────────────────────────────
    # CONNEXION
    # ─────────────────────────────────────────

    def connect(self) -> bool:
        try:
            response = requests.post(
                MONDAY_API_URL,
                headers=self._get_headers(),
                json={"query": ME_QUERY},
                timeout=10,
            )
            return response.status_code == 200 and not response.json().get("errors")

        except requests.RequestException as e:
            logger.error(f"monday connexion : {e}")
            return False

    # ─────────────────────────────────────────
    # FETCH BOARDS
    # ─────────────────────────────────────────

    def build_query(self) -> str:
        return BOARDS_QUERY % {
            "deals": self.deals_board_id,
            "work_orders": self.work_orders_board_id,
            "limit": self.items_limit,
        }

    def fetch_boards(self) -> FetchedBoards:
        """
        Un seul appel, jamais retenté.
        HTTP non 2xx, tableau "errors" GraphQL ou board absent → MondayAPIError.
        """
        try:
            response = requests.post(
                MONDAY_API_URL,
                headers=self._get_headers(),
                json={"query": self.build_query()},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"monday fetch_boards : {e}")
            raise MondayAPIError(f"Monday API unreachable: {e}") from e

        if not response.ok:
            raise MondayAPIError(
                f"Monday API Failed: {response.status_code} "
                f"{response.reason} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MondayAPIError(f"Monday API returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise MondayAPIError("Monday API returned an unexpected payload")

        if payload.get("errors"):
            raise MondayAPIError(
                f"Monday GraphQL Error: {json.dumps(payload['errors'])}"
            )

        data = payload.get("data") or {}
        deals = self._parse_board(data.get("deals"))
        work_orders = self._parse_board(data.get("work_orders"))

        if deals is None or work_orders is None:
            raise MondayAPIError("Could not find boards. Check IDs.")

        logger.info(
            f"monday : {len(deals.items)} deals, "
            f"{len(work_orders.items)} work orders"
        )
        return FetchedBoards(deals=deals, work_orders=work_orders)

    def _parse_board(self, boards) -> Optional[RawBoard]:
        # GraphQL renvoie une liste de boards, on prend le premier
        if not boards:
            return None
        board = boards[0] or {}
        items_page = board.get("items_page") or {}
        return RawBoard(
            columns=board.get("columns") or [],
            items=items_page.get("items") or [],
        )
