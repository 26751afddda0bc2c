"""
Discord Routes (Webhook Endpoint)
=================================

FastAPI route that receives Discord interactions and hands them to the
InteractionRouter.

ENDPOINTS:
----------
POST /api/discord/interactions - every slash command, context menu and modal submit

SECURITY:
---------
The raw body is verified against X-Signature-Ed25519 / X-Signature-Timestamp
BEFORE it is parsed. Unsigned or badly signed requests get a 401.

RESPONSE CODES:
---------------
401 - missing or invalid signature
400 - body is not JSON, or is not an interaction, or is an interaction we do not handle
200 - everything else, including command failures (rendered as a Discord message)
"""

import json
import logging

import pydantic
from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from cloud_agent_bridge.adapters.discord.discord_router import InteractionRouter
from cloud_agent_bridge.adapters.discord.discord_verify import (
    extract_signature_data,
    verify_key,
)
from cloud_agent_bridge.adapters.discord.interactions import Interaction
from cloud_agent_bridge.config.logging_config import correlation_id_var
from cloud_agent_bridge.config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/discord", tags=["discord"])


@router.post("/interactions")
@inject
async def discord_interactions(
    request: Request,
    interaction_router: FromDishka[InteractionRouter],
    settings: FromDishka[Settings],
):
    """Handle one Discord interaction. Discord expects a reply within 3 seconds."""
    body = await request.body()

    signature_data = extract_signature_data(request.headers)
    if signature_data is None:
        logger.warning("[DISCORD] Request without signature headers rejected")
        return JSONResponse(status_code=401, content={"error": "Missing signature headers"})

    signature, timestamp = signature_data
    if not verify_key(body, signature, timestamp, settings.discord_public_key):
        logger.warning("[DISCORD] Request with invalid signature rejected")
        return JSONResponse(status_code=401, content={"error": "Invalid signature"})

    try:
        payload = json.loads(body)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    try:
        interaction = Interaction.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.info("[DISCORD] Unparseable interaction: %s", e.error_count())
        return JSONResponse(status_code=400, content={"error": "Invalid interaction payload"})

    if interaction.id:
        correlation_id_var.set(interaction.id)

    logger.debug("[DISCORD] Interaction type=%s", interaction.type)
    response = await interaction_router.handle(interaction)
    return JSONResponse(status_code=response.status_code, content=response.body)
