"""Activity-feed ingress — the Helius enhanced webhook callback."""

from __future__ import annotations

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from solsignal.api.dependencies import get_engine, require_ingress_secret
from solsignal.engine.client import AlertEngine  # noqa: TC001
from solsignal.errors.definitions import ErrBodyNotJSON
from solsignal.notifications.events import parse_activity_batch

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post(
    "/transactionupdate",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_ingress_secret)],
)
async def transaction_update(
    request: Request,
    engine: Annotated[AlertEngine, Depends(get_engine)],
) -> PlainTextResponse:
    """Fan one Helius activity batch out to every subscribed email.

    Always answers ``200 OK`` once the secret and the body shape check out;
    per-recipient outcomes live in the ``sent_alerts`` records.
    """
    logger.info("Helius webhook callback")
    dispatcher = engine.dispatcher()

    try:
        payload = json.loads(await request.body())
    except ValueError as exc:
        raise ErrBodyNotJSON from exc

    events = parse_activity_batch(payload)
    logger.info("Count of impacted accounts: %d", len(events))

    await dispatcher.dispatch(events)
    return PlainTextResponse("OK")
