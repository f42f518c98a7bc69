# routers/auth.py
from typing import Optional

from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_credential_store
from expense_tracker.auth import CredentialStore
from expense_tracker.models.user import Credentials, TokenResponse

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/register", status_code=201)
async def register(
    body: Optional[Credentials] = None,
    store: CredentialStore = Depends(get_credential_store),
):
    body = body or Credentials()
    user_id = await store.register(body.username, body.password)
    return {"message": "User created successfully", "id": user_id}


@router.post("/login", response_model=TokenResponse)
async def login(
    body: Optional[Credentials] = None,
    store: CredentialStore = Depends(get_credential_store),
):
    body = body or Credentials()
    token = await store.login(body.username, body.password)
    return TokenResponse(token=token, username=body.username)
