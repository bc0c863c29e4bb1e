# local_relay.py
import logging

from web3 import Web3
from web3.exceptions import (
    ABIFunctionNotFound,
    ContractLogicError,
    MismatchedABI,
    TimeExhausted,
    Web3Exception,
    Web3ValidationError,
)

from chain_utils import get_relayer_account, get_web3
from contract_registry import ContractBinding, ContractRegistry
from errors import InsufficientFunds, RejectedByChain, RelayError
from relay_models import LocalRelayRequest
from sign.signature import SignatureComponents, split_signature

logger = logging.getLogger(__name__)


def _is_insufficient_funds(e: Exception) -> bool:
    return "insufficient funds" in str(e).lower()


def _function_inputs(abi: list, function_name: str, arity: int) -> list | None:
    matches = [
        item.get("inputs", [])
        for item in abi
        if item.get("type") == "function"
        and item.get("name") == function_name
        and len(item.get("inputs", [])) == arity
    ]
    return matches[0] if len(matches) == 1 else None


def _parse_int(value: str):
    """Decimal digits, or 0x hex. Anything else is returned as is."""
    text = value.strip()
    if text[:2].lower() == "0x":
        try:
            return int(text[2:], 16)
        except ValueError:
            return value
    if text.isdecimal():
        return int(text)
    return value


def coerce_args(abi: list, function_name: str, args: list) -> list:
    """
    Browser clients send uint256 values as decimal strings and addresses in
    any letter case. Convert those to what web3 expects, using the ABI entry
    that takes len(args) + 3 inputs (the trailing three are v, r, s).
    Anything that does not match one ABI entry is passed through untouched.
    """
    inputs = _function_inputs(abi, function_name, len(args) + 3)
    if inputs is None:
        return list(args)

    out = []
    for value, param in zip(args, inputs):
        typ = param.get("type", "")
        if typ == "address" and isinstance(value, str) and Web3.is_address(value):
            value = Web3.to_checksum_address(value)
        elif typ.startswith(("uint", "int")) and "[" not in typ and isinstance(value, str):
            value = _parse_int(value)
        out.append(value)
    return out


class LocalRelayer:
    """
    Sends contract calls signed by the relayer key (the relayer pays gas).
    One instance per process, built at startup and shared read-only.
    """

    def __init__(
        self,
        w3: Web3,
        account,
        registry: ContractRegistry,
        wait_for_confirmation: bool = True,
        confirmation_timeout: float = 120.0,
    ):
        self.w3 = w3
        self.account = account
        self.registry = registry
        self.wait_for_confirmation = wait_for_confirmation
        self.confirmation_timeout = confirmation_timeout

    @classmethod
    def from_settings(cls, settings) -> "LocalRelayer":
        return cls(
            w3=get_web3(settings.rpc_url),
            account=get_relayer_account(settings.private_key),
            registry=ContractRegistry.from_settings(settings),
            wait_for_confirmation=settings.wait_for_confirmation,
            confirmation_timeout=settings.confirmation_timeout,
        )

    @property
    def address(self) -> str:
        return self.account.address

    def relay(self, req: LocalRelayRequest) -> str:
        binding = self.registry.lookup(req.contractAddress)
        sig = split_signature(req.signature)

        tx_hash = self.send_contract_call(binding, req.functionName, req.args, sig)
        self.wait_for_receipt(tx_hash)
        return tx_hash

    def send_contract_call(
        self,
        binding: ContractBinding,
        function_name: str,
        args: list,
        sig: SignatureComponents,
    ) -> str:
        """Call function_name(*args, v, r, s) on the bound contract. Returns the tx hash (0x hex)."""
        contract = self.w3.eth.contract(address=binding.address, abi=binding.abi)
        call_args = coerce_args(binding.abi, function_name, args)

        try:
            fn = contract.functions[function_name](*call_args, sig.v, sig.r, sig.s)
            tx = fn.build_transaction(
                {
                    "from": self.account.address,
                    "nonce": self.w3.eth.get_transaction_count(self.account.address),
                    "chainId": self.w3.eth.chain_id,
                }
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except (ABIFunctionNotFound, MismatchedABI, Web3ValidationError) as e:
            raise RejectedByChain(str(e)) from e
        except ContractLogicError as e:
            reason = getattr(e, "message", None) or str(e)
            if _is_insufficient_funds(e):
                raise InsufficientFunds(reason) from e
            raise RejectedByChain(reason, details=reason) from e
        except (Web3Exception, ValueError) as e:
            if _is_insufficient_funds(e):
                raise InsufficientFunds(str(e)) from e
            raise RelayError(str(e)) from e
        except Exception as e:
            # transport failures (requests, sockets) from the RPC provider
            logger.error("RPC error sending %s.%s: %s", binding.name, function_name, e)
            raise RelayError(str(e)) from e

        tx_hash = Web3.to_hex(tx_hash)
        logger.info("Transaction sent: %s (%s.%s)", tx_hash, binding.name, function_name)
        return tx_hash

    def wait_for_receipt(self, tx_hash: str):
        """
        Best effort: a missing receipt is logged and never fails the relay,
        because the transaction is already broadcast.
        """
        if not self.wait_for_confirmation:
            return None

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.confirmation_timeout
            )
        except TimeExhausted:
            logger.warning(
                "No receipt for %s after %ss, returning hash anyway",
                tx_hash,
                self.confirmation_timeout,
            )
            return None
        except Exception:
            logger.exception("Error waiting for transaction confirmation: %s", tx_hash)
            return None

        logger.info("Transaction confirmed: %s status=%s", tx_hash, receipt["status"])
        return receipt
