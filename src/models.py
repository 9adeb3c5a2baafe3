# models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ─────────────────────────────────────────
# ENUMS
# ─────────────────────────────────────────

class Focus(str, Enum):
    SALES = "sales"
    OPERATIONS = "operations"

    @classmethod
    def from_board(cls, active_board: Optional[str]) -> "Focus":
        # "work_orders" → opérations, tout le reste → ventes
        if active_board == "work_orders":
            return cls.OPERATIONS
        return cls.SALES


# ─────────────────────────────────────────
# DONNÉES BRUTES (telles que renvoyées par monday.com)
# ─────────────────────────────────────────

@dataclass
class RawBoard:
    columns: list[dict] = field(default_factory=list)   # [{id, title}]
    items: list[dict] = field(default_factory=list)     # [{id, name, column_values}]

    def column_map(self) -> dict[str, str]:
        """
        Titre en minuscules → id de colonne.
        L'ordre d'itération suit l'ordre des colonnes du board.
        """
        return {
            str(c.get("title") or "").lower(): c.get("id")
            for c in self.columns
        }

    @staticmethod
    def value_of(item: dict, column_id: Optional[str]) -> str:
        if not column_id:
            return ""
        for cv in item.get("column_values") or []:
            if cv.get("id") == column_id:
                return cv.get("text") or ""
        return ""


# ─────────────────────────────────────────
# CORE MODELS
# ─────────────────────────────────────────

@dataclass
class Deal:
    id: str
    name: str
    stage: str = ""
    sector: str = "Unassigned"
    deal_value: float = 0.0           # toujours >= 0
    probability: int = 0              # toujours dans [0, 100]
    close_date: str = ""              # chaîne opaque, "" si absente
    owner: str = ""


@dataclass
class WorkOrder:
    id: str
    name: str
    status: str = "Pending"
    energy_type: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass
class DataQualityReport:
    missing_deal_value: int = 0
    missing_sector: int = 0
    missing_close_date: int = 0
    missing_work_order_status: int = 0

    def to_dict(self) -> dict:
        return {
            "missingDealValueCount": self.missing_deal_value,
            "missingSectorCount": self.missing_sector,
            "missingCloseDateCount": self.missing_close_date,
            "missingWorkOrderStatusCount": self.missing_work_order_status,
        }


@dataclass
class KPISet:
    total_pipeline_value: float = 0.0
    expected_revenue_weighted: float = 0.0
    deals_count: int = 0
    open_deals_count: int = 0
    pipeline_by_sector: dict[str, float] = field(default_factory=dict)
    total_work_orders: int = 0
    completed_work_orders: int = 0
    delayed_work_orders: int = 0
    execution_status_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalPipelineValue": self.total_pipeline_value,
            "expectedRevenueWeighted": self.expected_revenue_weighted,
            "dealsCount": self.deals_count,
            "openDealsCount": self.open_deals_count,
            "pipelineBySector": dict(self.pipeline_by_sector),
            "totalWorkOrders": self.total_work_orders,
            "completedWorkOrders": self.completed_work_orders,
            "delayedWorkOrders": self.delayed_work_orders,
            "executionStatusBreakdown": dict(self.execution_status_breakdown),
        }


@dataclass
class BoardSnapshot:
    """Résultat d'un cycle fetch → mapping → KPIs. Jamais partagé entre requêtes."""
    deals: list[Deal]
    work_orders: list[WorkOrder]
    kpis: KPISet
    data_quality: DataQualityReport
