"""Endpoints starting and stopping the polling session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from notification_client.application import NotificationClient
from notification_client.interfaces.api.dependencies import get_client, get_relay
from notification_client.interfaces.api.relay import UIRelay
from notification_client.interfaces.api.schemas import SessionCreate, SessionRead

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionRead)
async def read_session(client: NotificationClient = Depends(get_client)) -> SessionRead:
    return SessionRead(user_id=client.user_id, running=client.running)


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def start_session(
    payload: SessionCreate,
    client: NotificationClient = Depends(get_client),
    relay: UIRelay = Depends(get_relay),
) -> SessionRead:
    """Start polling for ``user_id`` and forward its events to the UI."""

    client.initialize(payload.user_id)
    relay.attach(client)
    return SessionRead(user_id=client.user_id, running=client.running)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(client: NotificationClient = Depends(get_client)) -> None:
    """Stop polling and forget the current user (logout)."""

    client.reset()
