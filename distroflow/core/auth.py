# distroflow/core/auth.py
from typing import Any, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt

from distroflow.core.config import get_settings
from distroflow.models.caller import Caller

settings = get_settings()

# Capability required to call the tenant provisioning endpoint.
PROVISION_TENANTS = "tenants:provision"

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise a 403
#   so we can answer with a 401 and our own message.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    'exp' and 'sub' must be present; 'aud' is not checked.
    Expired tokens answer 401 "Token expired", anything else "Invalid token".
    """
    options = {"verify_aud": False, "require_exp": True, "require_sub": True}
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options=options,
        )
    except ExpiredSignatureError:
        detail = "Token expired"
    except JWTError:
        detail = "Invalid token"
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def caller_from_claims(payload: dict[str, Any]) -> Caller:
    """
    Build a Caller from decoded JWT claims.

    Raises:
        HTTPException(401): if 'sub' or 'email' is missing.
    """
    sub = payload.get("sub")
    email = (payload.get("email") or "").strip().lower()

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    app_metadata = payload.get("app_metadata") or {}
    capabilities = app_metadata.get("capabilities") or []
    if isinstance(capabilities, str):
        capabilities = [capabilities]

    return Caller(
        id=str(sub),
        email=email,
        role=app_metadata.get("role"),
        capabilities=[str(c) for c in capabilities],
    )


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Caller:
    """
    Enforce authentication and resolve the caller.

    Raises:
        HTTPException(401): if the bearer token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer token",
        )
    payload = decode_access_token(credentials.credentials)
    return caller_from_claims(payload)


def has_capability(caller: Caller, capability: str) -> bool:
    """
    A capability is granted either explicitly through
    app_metadata.capabilities or implicitly by a role listed in
    PROVISIONER_ROLES.
    """
    if capability in caller.capabilities:
        return True
    if capability == PROVISION_TENANTS:
        return caller.role is not None and caller.role in settings.PROVISIONER_ROLES
    return False


def require_capability(capability: str) -> Callable[..., Caller]:
    """
    Dependency factory enforcing a capability on the authenticated caller.

    Usage:
        @router.post("", dependencies=[Depends(require_capability(PROVISION_TENANTS))])

    Raises:
        HTTPException(403): if the caller lacks the capability.
    """

    def _dependency(caller: Caller = Depends(require_auth)) -> Caller:
        if not has_capability(caller, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: missing capability {capability}",
            )
        return caller

    return _dependency
