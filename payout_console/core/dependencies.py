"""
FastAPI dependency injection utilities.

Provides reusable dependencies for the record store and other cross-cutting
concerns.
"""

from typing import Annotated

from fastapi import Depends, Request

from payout_console.core.config import Settings
from payout_console.persistence.base import RecordStore


def get_store(request: Request) -> RecordStore:
    """
    Return the record store attached to the running application.

    The store is created once per application in ``create_app`` and shared by
    every request, so all requests see the same in-memory data.

    Usage:
        @router.get("/payouts")
        def list_payouts(store: Store):
            return store.list_payouts()
    """
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


Store = Annotated[RecordStore, Depends(get_store)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
