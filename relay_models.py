# relay_models.py
"""Request bodies for both /relay variants and the checks run on them.

Raw bodies accept anything so that shape problems come back as our own
400 messages instead of framework validation output.
"""

import re
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

from chain_utils import is_address
from errors import InvalidInput

MISSING_PROVIDER_FIELDS = "Missing required fields: to, gasLimit, or chainId"

SPEEDS = ("safeLow", "average", "fast", "fastest")
DEFAULT_SPEED = "fast"
EMPTY_DATA = "0x"

_HEX_DATA_RE = re.compile(r"^0x([0-9a-fA-F]{2})*$")


# ---------- provider variant ----------

class ProviderRelayBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    to: Any = None
    data: Any = None
    gasLimit: Any = None
    chainId: Any = None
    speed: Any = None


class ProviderRelayRequest(BaseModel):
    to: str
    data: str = EMPTY_DATA
    gasLimit: int
    chainId: int
    speed: Literal["safeLow", "average", "fast", "fastest"] = DEFAULT_SPEED

    def to_descriptor(self) -> dict:
        """Transaction handed to the relayer provider. value is always sent
        explicitly so the provider never sees it undefined."""
        return {
            "to": self.to,
            "data": self.data,
            "gasLimit": self.gasLimit,
            "chainId": self.chainId,
            "speed": self.speed,
            "value": "0",
        }


def _to_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid {field}", field=field)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise InvalidInput(f"Invalid {field}", field=field) from None
    else:
        raise InvalidInput(f"Invalid {field}", field=field)

    if number <= 0:
        raise InvalidInput(f"Invalid {field}", field=field)
    return number


def validate_provider_request(body: Optional[ProviderRelayBody]) -> ProviderRelayRequest:
    body = body or ProviderRelayBody()

    # falsy counts as missing, same as the JS client expects
    if not body.to or not body.gasLimit or not body.chainId:
        raise InvalidInput(MISSING_PROVIDER_FIELDS)

    if not is_address(body.to):
        raise InvalidInput("Invalid to address", field="to")

    data = body.data or EMPTY_DATA
    if not isinstance(data, str) or not _HEX_DATA_RE.match(data):
        raise InvalidInput("Invalid data", field="data")

    speed = body.speed or DEFAULT_SPEED
    if speed not in SPEEDS:
        raise InvalidInput("Invalid speed", field="speed")

    return ProviderRelayRequest(
        to=body.to,
        data=data,
        gasLimit=_to_positive_int(body.gasLimit, "gasLimit"),
        chainId=_to_positive_int(body.chainId, "chainId"),
        speed=speed,
    )


# ---------- local signing variant ----------

class LocalRelayBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contractAddress: Any = None
    functionName: Any = None
    args: Any = None
    userAddress: Any = None
    signature: Any = None


class LocalRelayRequest(BaseModel):
    contractAddress: str
    functionName: str
    args: list
    userAddress: str
    signature: str


def validate_local_request(body: Optional[LocalRelayBody]) -> LocalRelayRequest:
    body = body or LocalRelayBody()

    if not is_address(body.contractAddress):
        raise InvalidInput("Invalid contract address", field="contractAddress")
    if not is_address(body.userAddress):
        raise InvalidInput("Invalid user address", field="userAddress")
    if not body.functionName or not isinstance(body.functionName, str):
        raise InvalidInput("Invalid function name", field="functionName")
    if not isinstance(body.args, list):
        raise InvalidInput("Invalid arguments", field="args")
    if not body.signature or not isinstance(body.signature, str):
        raise InvalidInput("Invalid signature", field="signature")

    return LocalRelayRequest(
        contractAddress=body.contractAddress,
        functionName=body.functionName,
        args=body.args,
        userAddress=body.userAddress,
        signature=body.signature,
    )
