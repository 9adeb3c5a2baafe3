# orchestrator/snapshot.py

import logging
from datetime import datetime
from typing import Optional

from connectors.base import BaseConnector
from models import BoardSnapshot
from normalization.mapper import EntityMapper
from analytics.kpis import compute_kpis

logger = logging.getLogger(__name__)


def build_snapshot(
    connector: BaseConnector,
    mapper: Optional[EntityMapper] = None,
    now: Optional[datetime] = None,
) -> BoardSnapshot:
    """
    Un cycle complet pour une requête :
    fetch → mapping (+ rapport qualité) → KPIs.

    Les erreurs de fetch (config, API) remontent telles quelles :
    l'appelant décide de la réponse HTTP.
    """
    boards = connector.fetch_boards()

    mapped = (mapper or EntityMapper()).map_boards(
        boards.deals, boards.work_orders
    )
    kpis = compute_kpis(mapped.deals, mapped.work_orders, now=now)

    logger.info(
        f"[{connector.source_name}] Snapshot — {len(mapped.deals)} deals, "
        f"{len(mapped.work_orders)} work orders, qualité {mapped.quality.to_dict()}"
    )

    return BoardSnapshot(
        deals=mapped.deals,
        work_orders=mapped.work_orders,
        kpis=kpis,
        data_quality=mapped.quality,
    )
