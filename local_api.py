# local_api.py
"""Relay by signing locally with the relayer key and calling a known contract."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request

from api_common import install_common
from local_relay import LocalRelayer
from relay_config import LocalSettings
from relay_models import LocalRelayBody, validate_local_request

logger = logging.getLogger(__name__)


def get_local_relayer(request: Request) -> LocalRelayer:
    return request.app.state.relayer


def create_local_app(settings: LocalSettings, relayer: LocalRelayer | None = None) -> FastAPI:
    # ABI files and the key are loaded here, so a broken deployment fails before listening
    relayer = relayer or LocalRelayer.from_settings(settings)

    app = FastAPI(title="Meta-Tx Relay (local signer)")
    app.state.settings = settings
    app.state.relayer = relayer
    logger.info("Relayer account %s, contracts: %s", relayer.address,
                [(b.name, b.address) for b in relayer.registry.bindings])

    install_common(
        app,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_credentials=True,
    )

    @app.get("/health")
    def health(relayer: LocalRelayer = Depends(get_local_relayer)):
        return {"ok": True, "variant": "local", "relayer": relayer.address}

    @app.post("/relay")
    def relay(body: Optional[LocalRelayBody] = None, relayer: LocalRelayer = Depends(get_local_relayer)):
        req = validate_local_request(body)
        logger.info(
            "Received request: contract=%s function=%s user=%s args=%s",
            req.contractAddress,
            req.functionName,
            req.userAddress,
            req.args,
        )

        tx_hash = relayer.relay(req)
        return {"success": True, "txHash": tx_hash}

    return app
