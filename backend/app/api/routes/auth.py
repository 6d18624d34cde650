"""Login Route — credential check for the dashboard sign-in form.

Invariants:
    - POST /login with form fields email, password
    - 200 {"user": {id, name, email}} on a match; 401 {"message"} otherwise
    - Store failures reach the global handler as PersistenceError (503), not 401
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_authenticator
from app.services.authenticate import Authenticator

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."


@router.post("/login")
async def login(
    request: Request, authenticator: Authenticator = Depends(get_authenticator),
):
    form = await request.form()
    user = await authenticator.authenticate(
        str(form.get("email", "")), str(form.get("password", "")),
    )
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"message": INVALID_CREDENTIALS_MESSAGE},
        )
    return {"user": asdict(user)}
