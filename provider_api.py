# provider_api.py
"""Relay through an external relayer provider (the provider signs and pays)."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request

from api_common import install_common
from defender_client import DefenderRelayerClient
from relay_config import ProviderSettings
from relay_models import ProviderRelayBody, validate_provider_request
from relay_service_core import relay_via_provider

logger = logging.getLogger(__name__)


def get_relayer_client(request: Request):
    return request.app.state.relayer_client


def create_provider_app(settings: ProviderSettings, client=None) -> FastAPI:
    """
    Build the provider variant. `client` defaults to a DefenderRelayerClient
    built from settings; anything with get_relayer() / send_transaction() works.
    """
    app = FastAPI(title="Meta-Tx Relay (provider)")
    app.state.settings = settings
    app.state.relayer_client = client or DefenderRelayerClient.from_settings(settings)
    logger.info("Relay signer initialized (%s)", settings.api_url)

    install_common(
        app,
        allow_origins=[settings.frontend_url],
        allow_methods=["POST", "OPTIONS"],
        allow_credentials=False,
    )

    @app.get("/health")
    def health():
        return {"ok": True, "variant": "provider"}

    @app.post("/relay")
    def relay(body: Optional[ProviderRelayBody] = None, client=Depends(get_relayer_client)):
        logger.debug("Body: %s", body)
        req = validate_provider_request(body)
        logger.info(
            "Relaying transaction: to=%s chainId=%s gasLimit=%s speed=%s",
            req.to,
            req.chainId,
            req.gasLimit,
            req.speed,
        )

        response = relay_via_provider(client, req)
        return {"hash": response["hash"]}

    return app
