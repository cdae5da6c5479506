from fastapi import Request

from core.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    """
    Shared Orchestrator built at startup from the environment settings.
    Tests swap it out through app.dependency_overrides.
    """
    return request.app.state.orchestrator
