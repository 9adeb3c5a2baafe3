# api/dependencies.py

from fastapi import Request

from config import Settings
from connectors import get_connector, DEFAULT_SOURCE
from connectors.base import BaseConnector
from orchestrator.chat import GenerationFallbackOrchestrator
from services.llm import build_backends


def get_settings(request: Request) -> Settings:
    """Config construite au démarrage, portée par app.state."""
    return request.app.state.settings


def connector_factory(request: Request):
    """
    Retourne une fabrique plutôt qu'un connecteur :
    une config incomplète doit échouer DANS la route,
    pour être renvoyée au format d'erreur de la route.
    """
    settings = get_settings(request)

    def build() -> BaseConnector:
        return get_connector(DEFAULT_SOURCE, settings)

    return build


def get_orchestrator(request: Request) -> GenerationFallbackOrchestrator:
    return GenerationFallbackOrchestrator(build_backends(get_settings(request)))
