"""Authentication routes (register, login).

Handler docstrings carry the OpenAPI operation for each route as YAML below
a ``---`` line; api.docs assembles them into the published document.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_user_repo
from domain.model.errors import UserNotFoundError, ValidationError
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    """Request model for user registration. Presence is checked by the handler."""
    login: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for user login."""
    login: Optional[str] = None
    password: Optional[str] = None


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "message": message})


@router.post("")
async def register(request: Optional[RegisterRequest] = None, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Duplicate logins raise ConflictError, answered by the error handler.

    ---
    summary: Регистрация нового пользователя
    tags: [Auth]
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            required:
              - login
              - password
            properties:
              login:
                type: string
                description: Логин пользователя
                example: "user123"
              email:
                type: string
                format: email
                description: Email пользователя (опционально)
                example: "user@example.com"
              password:
                type: string
                description: Пароль пользователя
                example: "password123"
    responses:
      "200":
        description: Успешная регистрация
        content:
          application/json:
            schema:
              type: object
              properties:
                ok:
                  type: boolean
                  example: true
      "400":
        description: Неправильные данные
        content:
          application/json:
            schema:
              type: object
              properties:
                ok:
                  type: boolean
                  example: false
                message:
                  type: string
                  example: "Неправильные данные"
      "409":
        description: Пользователь уже существует
        content:
          application/json:
            schema:
              type: object
              properties:
                ok:
                  type: boolean
                  example: false
                message:
                  type: string
                  example: "Пользователь уже существует"
    """
    # An absent body counts as an empty one
    if request is None:
        request = RegisterRequest()
    try:
        auth_service.register(repo, request.login, request.password, request.email)
    except ValidationError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))

    logger.info("User registered", extra={"login": request.login, "users": repo.count()})
    return {"ok": True}


@router.post("/login")
async def login(request: Optional[LoginRequest] = None, repo: UserRepository = Depends(get_user_repo)):
    """Check user credentials. No session or token is issued.

    A wrong password raises InvalidPasswordError, answered by the error handler.

    ---
    summary: Авторизация пользователя
    tags: [Auth]
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            required:
              - login
              - password
            properties:
              login:
                type: string
                description: Логин пользователя
                example: "nikita"
              password:
                type: string
                description: Пароль пользователя
                example: "123"
    responses:
      "200":
        description: Успешная авторизация
        content:
          application/json:
            schema:
              type: object
              properties:
                ok:
                  type: boolean
                  example: true
      "400":
        description: Логин и пароль обязательны
      "401":
        description: Неверные учетные данные
        content:
          application/json:
            schema:
              type: object
              properties:
                ok:
                  type: boolean
                  example: false
                message:
                  type: string
                  example: "Неверный логин или пароль"
    """
    if request is None:
        request = LoginRequest()
    try:
        auth_service.authenticate(repo, request.login, request.password)
    except ValidationError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))
    except UserNotFoundError as e:
        logger.info("Login for unknown user", extra={"login": e.login})
        return _fail(e.status, str(e))

    logger.info("User logged in", extra={"login": request.login})
    return {"ok": True}
