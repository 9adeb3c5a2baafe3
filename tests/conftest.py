# tests/conftest.py

import pytest
from datetime import datetime, timezone

from models import RawBoard
from connectors.base import FetchedBoards
from factories import make_item, FakeConnector


# ─────────────────────────────────────────
# FIXTURES : DONNÉES RÉALISTES
# Des boards qui ressemblent à ce que renvoie
# vraiment l'API GraphQL de monday.com :
# titres libres, toutes les valeurs en texte.
# ─────────────────────────────────────────

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def deal_columns():
    return [
        {"id": "person", "title": "Deal Owner"},
        {"id": "status", "title": "Deal Stage"},
        {"id": "numbers", "title": "Deal Value"},
        {"id": "dropdown", "title": "Sector/Service"},
        {"id": "text", "title": "Closure Probability"},
        {"id": "date", "title": "Tentative Close Date"},
    ]


@pytest.fixture
def work_order_columns():
    return [
        {"id": "status", "title": "Execution Status"},
        {"id": "dropdown", "title": "Nature of Work"},
        {"id": "date4", "title": "Probable Start Date"},
        {"id": "date5", "title": "Probable End Date"},
        {"id": "status_1", "title": "WO Status (billed)"},
    ]


@pytest.fixture
def deals_board(deal_columns):
    """
    3 deals : un gagné complet, un incomplet, un ouvert en cours.
    """
    return RawBoard(
        columns=deal_columns,
        items=[
            make_item(
                "101", "Alpha Solar Farm",
                person="Marie Dupont", status="Won", numbers="$100,000",
                dropdown="Renewables", text="High", date="2026-01-15",
            ),
            make_item(
                "102", "Beta Grid Survey",
                person="", status="Negotiation", numbers="",
                dropdown="", text="50%", date="",
            ),
            make_item(
                "103", "Gamma Wind Audit",
                person="Thomas Martin", status="Proposal", numbers="25,000.50",
                dropdown="Renewables", text="Low", date="2026-12-01",
            ),
        ],
    )


@pytest.fixture
def work_orders_board(work_order_columns):
    """
    5 work orders : terminé, en retard par date, bloqué,
    sans statut, pas encore démarré.
    """
    return RawBoard(
        columns=work_order_columns,
        items=[
            make_item("201", "WO-Alpha", status="Completed", dropdown="Solar",
                      date4="2019-11-01", date5="2020-01-01", status_1="Billed"),
            make_item("202", "WO-Beta", status="In Progress", dropdown="Grid",
                      date4="2020-01-01", date5="2020-06-30", status_1=""),
            make_item("203", "WO-Gamma", status="Stuck - client issue", dropdown="Wind",
                      date4="2026-09-01", date5="2099-01-01", status_1=""),
            make_item("204", "WO-Delta", status="", dropdown="",
                      date4="", date5="", status_1=""),
            make_item("205", "WO-Epsilon", status="Not Started", dropdown="Solar",
                      date4="2099-01-01", date5="2099-12-31", status_1=""),
        ],
    )


@pytest.fixture
def fake_connector(deals_board, work_orders_board):
    return FakeConnector(FetchedBoards(deals=deals_board, work_orders=work_orders_board))
