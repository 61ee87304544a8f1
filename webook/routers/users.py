from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from webook.core.errors import DuplicateUserError, ErrorKind, WebookError
from webook.core.jwt_tokens import TOKEN_HEADER, TokenInvalidError, UserClaims, issue_token, parse_token
from webook.domain.user import User
from webook.services.code_service import CodeService
from webook.services.user_service import InvalidCredentialsError, UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

EMAIL_RE = re.compile(r"^\w+([-+.]\w+)*@\w+([-.]\w+)*\.\w+([-.]\w+)*$")
PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[$@!%*#?&])[A-Za-z\d$@!%*#?&]{8,}$")
BIZ_LOGIN = "login"

CODE_OK = 0
CODE_USER_ERROR = 4
CODE_SYSTEM_ERROR = 5


def result(code: int = CODE_OK, msg: str = "", data: Any = None) -> dict:
    return {"code": code, "msg": msg, "data": data}


def system_error(exc: Exception) -> dict:
    logger.error("Request failed: %s", exc, exc_info=True)
    return result(CODE_SYSTEM_ERROR, "system error")


class SignUpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str
    confirm_password: str = Field(alias="confirmPassword")


class LoginRequest(BaseModel):
    email: str
    password: str


class EditRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    nickname: str = ""
    birthday: str = ""
    about_me: str = Field(default="", alias="aboutMe")


class SendCodeRequest(BaseModel):
    phone: str = ""


class LoginSmsRequest(BaseModel):
    phone: str = ""
    code: str = ""


def get_user_service(request: Request) -> UserService:
    return request.app.state.container.user_service


def get_code_service(request: Request) -> CodeService:
    return request.app.state.container.code_service


def current_claims(request: Request) -> UserClaims:
    """Resolve the JWT from ``Authorization: Bearer``; 401 if missing, invalid or replayed elsewhere."""
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="missing token")
    try:
        claims = parse_token(auth.split(" ", 1)[1].strip())
    except TokenInvalidError:
        raise HTTPException(status_code=401, detail="invalid token")
    if claims.user_agent != request.headers.get("User-Agent", ""):
        raise HTTPException(status_code=401, detail="invalid token")
    return claims


def _set_jwt(request: Request, response: Response, uid: int) -> None:
    response.headers[TOKEN_HEADER] = issue_token(uid, request.headers.get("User-Agent", ""))


@router.post("/signup")
def signup(req: SignUpRequest, svc: UserService = Depends(get_user_service)):
    if not EMAIL_RE.match(req.email):
        return result(CODE_USER_ERROR, "invalid email")
    if req.password != req.confirm_password:
        return result(CODE_USER_ERROR, "passwords do not match")
    if not PASSWORD_RE.match(req.password):
        return result(
            CODE_USER_ERROR,
            "password must be at least 8 characters and contain a letter, a digit and a special character",
        )
    try:
        svc.signup(User(email=req.email, password=req.password))
    except DuplicateUserError:
        return result(CODE_USER_ERROR, "email already registered")
    except WebookError as exc:
        return system_error(exc)
    return result(msg="signed up")


@router.post("/login")
def login(
    req: LoginRequest,
    request: Request,
    response: Response,
    svc: UserService = Depends(get_user_service),
):
    try:
        user = svc.login(req.email, req.password)
    except InvalidCredentialsError:
        return result(CODE_USER_ERROR, "wrong email or password")
    except WebookError as exc:
        return system_error(exc)
    _set_jwt(request, response, user.id)
    return result(msg="logged in")


@router.post("/edit")
def edit(
    req: EditRequest,
    claims: UserClaims = Depends(current_claims),
    svc: UserService = Depends(get_user_service),
):
    try:
        birthday = date.fromisoformat(req.birthday)
    except ValueError:
        return result(CODE_USER_ERROR, "birthday must be YYYY-MM-DD")
    try:
        svc.update_non_sensitive_info(
            User(id=claims.uid, nickname=req.nickname, birthday=birthday, about_me=req.about_me)
        )
    except WebookError as exc:
        return system_error(exc)
    return result(msg="updated")


@router.get("/profile")
def profile(
    claims: UserClaims = Depends(current_claims),
    svc: UserService = Depends(get_user_service),
):
    try:
        user = svc.find_by_id(claims.uid)
    except WebookError as exc:
        return system_error(exc)
    return result(
        data={
            "nickname": user.nickname,
            "email": user.email,
            "phone": user.phone,
            "aboutMe": user.about_me,
            "birthday": user.birthday.isoformat() if user.birthday else "",
        }
    )


@router.post("/login_sms/code/send")
def send_login_sms_code(req: SendCodeRequest, svc: CodeService = Depends(get_code_service)):
    if not req.phone:
        return result(CODE_USER_ERROR, "phone number is required")
    try:
        svc.send(BIZ_LOGIN, req.phone)
    except WebookError as exc:
        if exc.kind is ErrorKind.SEND_TOO_MANY:
            return result(CODE_USER_ERROR, "code sent too frequently, try again later")
        return system_error(exc)
    return result(msg="code sent")


@router.post("/login_sms")
def login_sms(
    req: LoginSmsRequest,
    request: Request,
    response: Response,
    code_svc: CodeService = Depends(get_code_service),
    user_svc: UserService = Depends(get_user_service),
):
    try:
        ok = code_svc.verify(BIZ_LOGIN, req.phone, req.code)
    except WebookError as exc:
        return system_error(exc)
    if not ok:
        return result(CODE_USER_ERROR, "wrong verification code")
    try:
        user = user_svc.find_or_create(req.phone)
    except WebookError as exc:
        return system_error(exc)
    _set_jwt(request, response, user.id)
    return result(msg="logged in")
