from fastapi import Request

from api.config import Settings
from api.context import AppContext
from port.user_repository import UserRepository


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings(request: Request) -> Settings:
    return get_context(request).settings


def get_user_repo(request: Request) -> UserRepository:
    return get_context(request).user_repo
