# Browser Relay - Request Dependencies
"""
FastAPI dependencies resolving the per-app services.

Services are created by create_app() and kept on app.state, so tests can
build several apps with separate stores.
"""

from fastapi import Request

from browser_relay.config import Settings
from browser_relay.ingestion import IngestionService
from browser_relay.storage import LogBroadcaster, LogStore
from browser_relay.tools import ToolAdapter


def get_store(request: Request) -> LogStore:
    return request.app.state.store


def get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion


def get_broadcaster(request: Request) -> LogBroadcaster:
    return request.app.state.broadcaster


def get_tool_adapter(request: Request) -> ToolAdapter:
    return request.app.state.tool_adapter


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
