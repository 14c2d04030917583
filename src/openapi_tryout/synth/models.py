"""Editable request state and the shapes exchanged with the HTTP executor."""

from typing import Any, Literal

from pydantic import BaseModel

AuthType = Literal["none", "api-key", "bearer", "basic"]
ParamLocation = Literal["query", "path", "header", "cookie"]

BODY_METHODS = ("POST", "PUT", "PATCH")

PLACEHOLDER_BODY = "{\n  \n}"


class ParamRow(BaseModel):
    """One editable row of the parameters table."""

    enabled: bool = False
    key: str = ""
    value: str = ""
    description: str | None = None
    param_in: ParamLocation | None = None  # None for rows the user typed in

    @property
    def is_blank(self) -> bool:
        return self.key == "" and self.value == ""


class HeaderRow(BaseModel):
    enabled: bool = False
    key: str = ""
    value: str = ""


class AuthConfig(BaseModel):
    type: AuthType = "none"
    api_key: str | None = None
    token: str | None = None
    username: str | None = None
    password: str | None = None


class RequestModel(BaseModel):
    """Request state seeded from an operation and edited by the user."""

    method: str = "GET"
    url: str = ""
    params: list[ParamRow] = []
    headers: list[HeaderRow] = []
    auth: AuthConfig = AuthConfig()
    body: str = PLACEHOLDER_BODY


class RequestDescriptor(BaseModel):
    """A fully serialized request, ready to hand to an executor."""

    method: str
    url: str
    headers: dict[str, str] = {}
    body: str | None = None
    auth: AuthConfig = AuthConfig()

    def to_payload(self) -> dict:
        """Dict form of the descriptor; `body` is absent unless it is sent."""
        return self.model_dump(exclude_none=True)


class ResponseModel(BaseModel):
    status: int
    status_text: str
    time: int  # ms
    size: float  # KB
    headers: dict[str, str] = {}
    body: Any = None
