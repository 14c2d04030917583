"""Edits applied to a RequestModel the way a user fills in the tables.

Every edit keeps the single trailing blank row in params and headers:
typing into the blank row enables it and a new blank row is appended.
"""

from openapi_tryout.synth.models import AuthConfig, HeaderRow, ParamRow, RequestModel


def set_param(model: RequestModel, key: str, value: str) -> RequestModel:
    """Fill the param named `key`, or add it as a user-entered query param."""
    rows = [row.model_copy() for row in model.params if not row.is_blank]
    for row in rows:
        if row.key == key:
            row.value = value
            row.enabled = True
            break
    else:
        rows.append(ParamRow(enabled=True, key=key, value=value))
    rows.append(ParamRow())
    return model.model_copy(update={"params": rows})


def set_header(model: RequestModel, key: str, value: str) -> RequestModel:
    """Fill the header named `key` (case-insensitive), or append it."""
    rows = [row.model_copy() for row in model.headers if row.key or row.value]
    for row in rows:
        if row.key.lower() == key.lower():
            row.value = value
            row.enabled = True
            break
    else:
        rows.append(HeaderRow(enabled=True, key=key, value=value))
    rows.append(HeaderRow())
    return model.model_copy(update={"headers": rows})


def set_auth(model: RequestModel, **credentials) -> RequestModel:
    """Fill in credentials.

    The detected auth type is kept; when it is "none" the type is inferred
    from the credentials given (token, then api_key, then username).
    """
    data = model.auth.model_dump()
    data.update({k: v for k, v in credentials.items() if v is not None})
    if data["type"] == "none":
        if data["token"]:
            data["type"] = "bearer"
        elif data["api_key"]:
            data["type"] = "api-key"
        elif data["username"]:
            data["type"] = "basic"
    return model.model_copy(update={"auth": AuthConfig(**data)})
