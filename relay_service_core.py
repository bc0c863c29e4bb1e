# relay_service_core.py
import logging

from errors import AuthenticationFailed, ProviderUnavailable, RelayError
from relay_models import ProviderRelayRequest

logger = logging.getLogger(__name__)


def check_relayer(client) -> dict:
    """
    Liveness check before submitting anything.
    Bad credentials stay an authentication failure; every other failure
    means the provider is unreachable.
    """
    try:
        info = client.get_relayer()
    except AuthenticationFailed:
        raise
    except Exception as e:
        logger.error("Relayer connection error: %s", e)
        details = getattr(e, "details", None)
        raise ProviderUnavailable(f"Failed to connect to relayer: {e}", details=details) from e

    logger.info("Relayer info: %s", info)
    return info


def relay_via_provider(client, req: ProviderRelayRequest) -> dict:
    """
    Provider flow:
    1. check the relayer is reachable
    2. hand it the transaction descriptor
    Returns the provider's transaction handle. Does not wait for mining.
    """
    check_relayer(client)

    tx = req.to_descriptor()
    logger.info("Sending transaction: %s", tx)

    try:
        response = client.send_transaction(tx)
    except RelayError:
        raise
    except Exception as e:
        raise RelayError(str(e)) from e

    logger.info("Relayer response: %s", response)
    if not isinstance(response, dict) or not response.get("hash"):
        raise RelayError("Relayer response did not include a transaction hash", details=response)
    return response
