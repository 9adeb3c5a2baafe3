# tests/test_kpis.py

"""
Ce qu'on teste :
→ Les sommes de pipeline (brute et pondérée) sont exactes
→ Les deals ouverts excluent exactement won/lost/done/closed/fulfilled
→ La règle de retard : mot-clé d'abord, puis date de fin passée
→ La répartition des statuts garde la casse d'origine

Pas de mock nécessaire : ce sont des fonctions pures.
L'heure de référence est figée (fixture `now`).
"""

import pytest
from datetime import datetime, timezone

from models import Deal, WorkOrder, DataQualityReport, RawBoard
from analytics.kpis import (
    compute_kpis,
    is_completed,
    is_delayed,
    is_open_deal,
    CLOSED_DEAL_STAGES,
)
from normalization.mapper import EntityMapper
from factories import make_item


def deal(value=0.0, probability=0, stage="Proposal", sector="Unassigned", **kw):
    return Deal(
        id=kw.get("id", "d"),
        name=kw.get("name", "Deal"),
        stage=stage,
        sector=sector,
        deal_value=value,
        probability=probability,
    )


def work_order(status="Pending", end_date="", name="WO"):
    return WorkOrder(id=name, name=name, status=status, end_date=end_date)


class TestPipelineTotals:

    def test_sums(self, now):
        deals = [
            deal(100000, 90),
            deal(25000.5, 20),
            deal(0, 50),
        ]
        kpis = compute_kpis(deals, [], now=now)

        assert kpis.total_pipeline_value == pytest.approx(
            sum(d.deal_value for d in deals)
        )
        assert kpis.expected_revenue_weighted == pytest.approx(
            sum(d.deal_value * d.probability / 100 for d in deals)
        )
        assert kpis.expected_revenue_weighted == pytest.approx(95000.1)
        assert kpis.deals_count == 3

    def test_empty(self, now):
        kpis = compute_kpis([], [], now=now)

        assert kpis.total_pipeline_value == 0
        assert kpis.expected_revenue_weighted == 0
        assert kpis.deals_count == 0
        assert kpis.pipeline_by_sector == {}
        assert kpis.execution_status_breakdown == {}

    def test_pipeline_by_sector(self, now):
        deals = [
            deal(100, sector="Renewables"),
            deal(50, sector="Unassigned"),
            deal(25, sector="Renewables"),
        ]
        kpis = compute_kpis(deals, [], now=now)

        assert kpis.pipeline_by_sector == {"Renewables": 125, "Unassigned": 50}
        assert list(kpis.pipeline_by_sector) == ["Renewables", "Unassigned"]


class TestOpenDeals:

    @pytest.mark.parametrize("stage", ["won", "Lost", "DONE", "Closed", "fulfilled"])
    def test_closed_stages_excluded(self, stage):
        assert not is_open_deal(deal(stage=stage))

    @pytest.mark.parametrize("stage", [
        "Negotiation", "Proposal", "", "Closed Won", "fullfilled", "Won - pending signature",
    ])
    def test_every_other_stage_is_open(self, stage):
        assert is_open_deal(deal(stage=stage))

    def test_closed_set_is_exact(self):
        assert CLOSED_DEAL_STAGES == {"won", "lost", "done", "closed", "fulfilled"}

    def test_open_count(self, now):
        deals = [deal(stage="Won"), deal(stage="Negotiation"), deal(stage="lost")]
        assert compute_kpis(deals, [], now=now).open_deals_count == 1


class TestDelayRule:

    def test_stuck_status_delayed_regardless_of_date(self, now):
        assert is_delayed(work_order("Stuck - client issue", "2099-01-01"), now)
        assert is_delayed(work_order("Stuck - client issue", ""), now)

    @pytest.mark.parametrize("status", ["Delayed", "ISSUE raised", "stuck"])
    def test_keyword_statuses(self, status, now):
        assert is_delayed(work_order(status), now)

    def test_past_end_date_in_progress_is_delayed(self, now):
        assert is_delayed(work_order("In Progress", "2020-06-30"), now)

    def test_completed_with_past_end_date_is_not_delayed(self, now):
        assert not is_delayed(work_order("Completed", "2020-06-30"), now)
        assert not is_delayed(work_order("done", "2020-06-30"), now)

    def test_finished_is_not_exempt_from_date_rule(self, now):
        """"finished" compte comme terminé, mais pas comme exempté de retard."""
        assert is_delayed(work_order("Finished", "2020-06-30"), now)

    def test_past_end_date_with_time_is_delayed(self, now):
        """Colonne date monday avec heure : pas de "T", pas de secondes."""
        assert is_delayed(work_order("In Progress", "2020-06-30 10:00"), now)
        assert not is_delayed(work_order("In Progress", "2099-06-30 10:00"), now)

    def test_future_end_date_not_delayed(self, now):
        assert not is_delayed(work_order("In Progress", "2099-01-01"), now)

    def test_no_end_date_not_delayed(self, now):
        assert not is_delayed(work_order("In Progress", ""), now)

    def test_unparsable_end_date_not_delayed(self, now):
        assert not is_delayed(work_order("In Progress", "soon"), now)

    def test_strictly_before_now(self):
        now = datetime(2026, 1, 15, 0, 0, tzinfo=timezone.utc)
        assert not is_delayed(work_order("In Progress", "2026-01-15"), now)

    def test_naive_now_treated_as_utc(self):
        kpis = compute_kpis(
            [], [work_order("In Progress", "2020-01-01")],
            now=datetime(2026, 1, 1),
        )
        assert kpis.delayed_work_orders == 1


class TestWorkOrderKpis:

    def test_counts(self, now):
        work_orders = [
            work_order("Completed", "2020-01-01"),
            work_order("finished"),
            work_order("In Progress", "2020-06-30"),
            work_order("Stuck - client issue", "2099-01-01"),
            work_order("Pending"),
        ]
        kpis = compute_kpis([], work_orders, now=now)

        assert kpis.total_work_orders == 5
        assert kpis.completed_work_orders == 2
        assert kpis.delayed_work_orders == 2

    def test_status_breakdown_is_case_sensitive(self, now):
        """
        Comportement conservé volontairement :
        "Done" et "done" sont deux entrées distinctes.
        """
        work_orders = [work_order("Done"), work_order("done"), work_order("Done")]
        kpis = compute_kpis([], work_orders, now=now)

        assert kpis.execution_status_breakdown == {"Done": 2, "done": 1}
        assert kpis.completed_work_orders == 3


class TestScenario:

    def test_two_deals_end_to_end(self, deal_columns, now):
        """
        Un deal gagné à "$100,000", un deal en négociation sans valeur.
        """
        board = RawBoard(
            columns=deal_columns,
            items=[
                make_item("1", "Won deal", numbers="$100,000", status="Won"),
                make_item("2", "Open deal", numbers="", status="Negotiation"),
            ],
        )
        mapped = EntityMapper().map_boards(board, RawBoard())
        kpis = compute_kpis(mapped.deals, mapped.work_orders, now=now)

        assert kpis.deals_count == 2
        assert kpis.open_deals_count == 1
        assert kpis.total_pipeline_value == 100000
        assert mapped.quality.missing_deal_value == 1

    def test_fixture_boards(self, deals_board, work_orders_board, now):
        mapped = EntityMapper().map_boards(deals_board, work_orders_board)
        kpis = compute_kpis(mapped.deals, mapped.work_orders, now=now)

        assert kpis.total_pipeline_value == pytest.approx(125000.5)
        assert kpis.expected_revenue_weighted == pytest.approx(90000 + 5000.1)
        assert kpis.open_deals_count == 2
        assert kpis.completed_work_orders == 1
        assert kpis.delayed_work_orders == 2
        assert kpis.execution_status_breakdown == {
            "Completed": 1,
            "In Progress": 1,
            "Stuck - client issue": 1,
            "Pending": 1,
            "Not Started": 1,
        }
        assert isinstance(mapped.quality, DataQualityReport)


class TestCompleted:

    @pytest.mark.parametrize("status", ["Done", "completed", "FINISHED"])
    def test_completed_statuses(self, status):
        assert is_completed(work_order(status))

    @pytest.mark.parametrize("status", ["In Progress", "Completed - pending invoice", ""])
    def test_other_statuses(self, status):
        assert not is_completed(work_order(status))
