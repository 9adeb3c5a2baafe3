# analytics/context.py

from models import Focus, KPISet, Deal, WorkOrder
from analytics.kpis import is_completed

# Le contexte est la seule base factuelle envoyée au LLM : on le garde court
CONTEXT_ITEMS_LIMIT = 5


def format_money(value: float) -> str:
    """100000 → "100,000" ; 1234.5 → "1,234.50"."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def build_context(
    focus: Focus,
    kpis: KPISet,
    deals: list[Deal],
    work_orders: list[WorkOrder],
) -> str:
    """
    Bloc texte à structure fixe : métriques clés, puis au plus
    CONTEXT_ITEMS_LIMIT entrées dans l'ordre du board (pas de tri).
    """
    if focus == Focus.OPERATIONS:
        return _operations_context(kpis, work_orders)
    return _sales_context(kpis, deals)


def _operations_context(kpis: KPISet, work_orders: list[WorkOrder]) -> str:
    open_orders = [w for w in work_orders if not is_completed(w)]

    lines = [
        "FOCUS: Work Orders & Operations",
        f"- Total Projects: {kpis.total_work_orders}",
        f"- Completed: {kpis.completed_work_orders}",
        f"- Delayed: {kpis.delayed_work_orders}",
        f"- Total Pipeline Value (Ref): ${format_money(kpis.total_pipeline_value)}",
        "",
        "- Open Work Orders:",
    ]
    for wo in open_orders[:CONTEXT_ITEMS_LIMIT]:
        energy = f" ({wo.energy_type})" if wo.energy_type else ""
        due = wo.end_date or "n/a"
        lines.append(f"- {wo.name}: {wo.status}{energy} | Due: {due}")

    if not open_orders:
        lines.append("- None")

    return "\n".join(lines)


def _sales_context(kpis: KPISet, deals: list[Deal]) -> str:
    lines = [
        "FOCUS: Sales Pipeline & Deals",
        f"- Total Pipeline: ${format_money(kpis.total_pipeline_value)}",
        f"- Weighted Revenue: ${format_money(kpis.expected_revenue_weighted)}",
        f"- Open Deals: {kpis.open_deals_count}",
        f"- Delayed Projects (Ref): {kpis.delayed_work_orders}",
        "",
        "- Top Deals:",
    ]
    for deal in deals[:CONTEXT_ITEMS_LIMIT]:
        stage = deal.stage or "No stage"
        lines.append(
            f"- {deal.name}: ${format_money(deal.deal_value)} "
            f"({stage}, {deal.probability}%)"
        )

    if not deals:
        lines.append("- None")

    return "\n".join(lines)
