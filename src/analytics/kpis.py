# analytics/kpis.py

import logging
from datetime import datetime, timezone
from typing import Optional

from models import Deal, WorkOrder, KPISet
from normalization.fields import parse_date

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────
# ENSEMBLES DE STATUTS
# Comparaisons exactes, insensibles à la casse
# ─────────────────────────────────────────

CLOSED_DEAL_STAGES = frozenset({"won", "lost", "done", "closed", "fulfilled"})
COMPLETED_STATUSES = frozenset({"done", "completed", "finished"})

# "finished" compte comme terminé mais n'exempte pas de la règle de date
DELAY_EXEMPT_STATUSES = frozenset({"done", "completed"})
DELAY_KEYWORDS = ("delayed", "stuck", "issue")


def is_open_deal(deal: Deal) -> bool:
    return deal.stage.lower() not in CLOSED_DEAL_STAGES


def is_completed(work_order: WorkOrder) -> bool:
    return work_order.status.lower() in COMPLETED_STATUSES


def is_delayed(work_order: WorkOrder, now: datetime) -> bool:
    """
    (a) statut qui signale un blocage → en retard, sans regarder la date
    (b) sinon : date de fin passée et statut non terminé → en retard
    Une date de fin illisible ne compte jamais comme retard.
    """
    status = work_order.status.lower()
    if any(keyword in status for keyword in DELAY_KEYWORDS):
        return True

    if work_order.end_date and status not in DELAY_EXEMPT_STATUSES:
        end = parse_date(work_order.end_date)
        return end is not None and end < now

    return False


def compute_kpis(
    deals: list[Deal],
    work_orders: list[WorkOrder],
    now: Optional[datetime] = None,
) -> KPISet:
    """
    Réduit les entités d'un cycle en KPIs.
    now : heure de référence pour la règle de retard (UTC, injectable en test)
    """
    now = now or datetime.now(tz=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    pipeline_by_sector: dict[str, float] = {}
    for deal in deals:
        pipeline_by_sector[deal.sector] = (
            pipeline_by_sector.get(deal.sector, 0.0) + deal.deal_value
        )

    # Groupé sur le statut tel quel : "Done" et "done" restent séparés
    status_breakdown: dict[str, int] = {}
    for wo in work_orders:
        status_breakdown[wo.status] = status_breakdown.get(wo.status, 0) + 1

    kpis = KPISet(
        total_pipeline_value=sum(d.deal_value for d in deals),
        expected_revenue_weighted=sum(
            d.deal_value * (d.probability / 100) for d in deals
        ),
        deals_count=len(deals),
        open_deals_count=sum(1 for d in deals if is_open_deal(d)),
        pipeline_by_sector=pipeline_by_sector,
        total_work_orders=len(work_orders),
        completed_work_orders=sum(1 for w in work_orders if is_completed(w)),
        delayed_work_orders=sum(1 for w in work_orders if is_delayed(w, now)),
        execution_status_breakdown=status_breakdown,
    )

    logger.info(
        f"KPIs — pipeline {kpis.total_pipeline_value:.0f} / "
        f"{kpis.open_deals_count} deals ouverts / "
        f"{kpis.delayed_work_orders} work orders en retard"
    )
    return kpis
