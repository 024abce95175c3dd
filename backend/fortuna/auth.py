from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

http_bearer = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str:
    """
    Token to forward to the Fortuna API.

    Missing or non-bearer credentials yield an empty token; the remote API is
    the one that decides whether the caller is authorized.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        return ""
    return credentials.credentials
