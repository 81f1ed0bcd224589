# api/dependencies.py
from fastapi import Request

from lending.context import LendingContext


def get_context(request: Request) -> LendingContext:
    """FastAPI dependency returning the services wired into the app"""
    return request.app.state.context
