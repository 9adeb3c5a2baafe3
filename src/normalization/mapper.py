# normalization/mapper.py

import logging
from dataclasses import dataclass
from typing import Optional

from models import RawBoard, Deal, WorkOrder, DataQualityReport
from normalization.columns import ColumnResolver, deal_resolver, work_order_resolver
from normalization.fields import (
    parse_number,
    parse_probability,
    normalize_text,
    normalize_date,
)

logger = logging.getLogger(__name__)


@dataclass
class MappedBoards:
    deals: list[Deal]
    work_orders: list[WorkOrder]
    quality: DataQualityReport


class EntityMapper:
    """
    Items bruts → entités typées.

    Pur et ordonné : un item = une entité, dans l'ordre du board.
    Aucun item n'est jamais écarté, quel que soit le nombre de champs manquants.
    Chaque champ vide incrémente le compteur correspondant du rapport qualité.
    """

    def __init__(
        self,
        deal_columns: Optional[ColumnResolver] = None,
        work_order_columns: Optional[ColumnResolver] = None,
    ):
        self.deal_columns = deal_columns or deal_resolver()
        self.work_order_columns = work_order_columns or work_order_resolver()

    def map_boards(self, deals_board: RawBoard, work_orders_board: RawBoard) -> MappedBoards:
        quality = DataQualityReport()
        deals = self.map_deals(deals_board, quality)
        work_orders = self.map_work_orders(work_orders_board, quality)
        return MappedBoards(deals=deals, work_orders=work_orders, quality=quality)

    # ─────────────────────────────────────────
    # DEALS
    # ─────────────────────────────────────────

    def map_deals(self, board: RawBoard, quality: DataQualityReport) -> list[Deal]:
        columns = self.deal_columns.resolve_all(board.column_map())
        missing = [f for f, column_id in columns.items() if column_id is None]
        if missing:
            logger.info(f"Board deals : colonnes introuvables {missing}")

        deals = []
        for item in board.items:
            row = {f: board.value_of(item, column_id) for f, column_id in columns.items()}

            deal_value = max(parse_number(row.get("deal_value")), 0.0)
            sector = normalize_text(row.get("sector"))
            close_date = normalize_date(row.get("close_date"))

            if not deal_value:
                quality.missing_deal_value += 1
            if not sector:
                quality.missing_sector += 1
            if not close_date:
                quality.missing_close_date += 1

            deals.append(Deal(
                id=str(item.get("id", "")),
                name=normalize_text(item.get("name")),
                stage=normalize_text(row.get("stage")),
                sector=sector or "Unassigned",
                deal_value=deal_value,
                probability=parse_probability(row.get("probability")),
                close_date=close_date,
                owner=normalize_text(row.get("owner")),
            ))

        logger.info(f"Board deals : {len(deals)} deals")
        return deals

    # ─────────────────────────────────────────
    # WORK ORDERS
    # ─────────────────────────────────────────

    def map_work_orders(self, board: RawBoard, quality: DataQualityReport) -> list[WorkOrder]:
        columns = self.work_order_columns.resolve_all(board.column_map())
        missing = [f for f, column_id in columns.items() if column_id is None]
        if missing:
            logger.info(f"Board work orders : colonnes introuvables {missing}")

        work_orders = []
        for item in board.items:
            row = {f: board.value_of(item, column_id) for f, column_id in columns.items()}

            status = normalize_text(row.get("status"))
            if not status:
                quality.missing_work_order_status += 1

            work_orders.append(WorkOrder(
                id=str(item.get("id", "")),
                name=normalize_text(item.get("name")),
                status=status or "Pending",
                energy_type=normalize_text(row.get("energy_type")),
                start_date=normalize_date(row.get("start_date")),
                end_date=normalize_date(row.get("end_date")),
            ))

        logger.info(f"Board work orders : {len(work_orders)} work orders")
        return work_orders
