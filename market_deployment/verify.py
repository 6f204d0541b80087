import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from eth_abi import encode
from eth_typing import ChecksumAddress

from market_deployment.constants import (
    MTOKEN_CONSTRUCTOR_ABI_TYPES,
    VERIFICATION_CODE_FORMAT,
    VERIFICATION_COMPILER_VERSION,
    VERIFICATION_CONTRACT_NAME,
    VERIFICATION_OPTIMIZER_RUNS,
)
from market_deployment.models import VerificationResult
from market_deployment.utils import _load_json

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60


def encode_constructor_arguments(constructor_args) -> str:
    """ABI encodes the mToken constructor arguments as hex without a 0x prefix."""
    constructor_args = list(constructor_args)
    if len(constructor_args) != len(MTOKEN_CONSTRUCTOR_ABI_TYPES):
        raise ValueError(
            f"Constructor arguments length mismatch - expected "
            f"{len(MTOKEN_CONSTRUCTOR_ABI_TYPES)}, got {len(constructor_args)}."
        )
    return encode(MTOKEN_CONSTRUCTOR_ABI_TYPES, constructor_args).hex()


class MoonscanVerifier:
    """
    Best-effort source verification against an Etherscan-family explorer API.
    Failures are reported through the returned result, never raised.
    """

    def __init__(self, api_url: str, api_key: Optional[str], source_filepath: Optional[Path]):
        self.api_url = api_url
        self.api_key = api_key
        self.source_filepath = source_filepath

    def _load_source(self) -> str:
        if not self.source_filepath:
            raise FileNotFoundError("No verification source configured for this environment.")
        return json.dumps(_load_json(self.source_filepath))

    def _payload(
        self, contract_address: ChecksumAddress, constructor_arguments: str
    ) -> Dict[str, Any]:
        return {
            "apikey": self.api_key,
            "module": "contract",
            "action": "verifysourcecode",
            "contractaddress": contract_address,
            "sourceCode": self._load_source(),
            "codeformat": VERIFICATION_CODE_FORMAT,
            "contractname": VERIFICATION_CONTRACT_NAME,
            "compilerversion": VERIFICATION_COMPILER_VERSION,
            "optimizationUsed": 1,
            "runs": VERIFICATION_OPTIMIZER_RUNS,
            # sic - the explorer API's own spelling
            "constructorArguements": constructor_arguments,
        }

    def verify(
        self, contract_address: ChecksumAddress, constructor_arguments: str
    ) -> VerificationResult:
        logger.info("Verifying contract %s on Moonscan...", contract_address)
        try:
            payload = self._payload(contract_address, constructor_arguments)
            response = requests.post(self.api_url, data=payload, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, OSError, ValueError) as e:
            logger.debug("Verification request to %s failed", self.api_url, exc_info=True)
            status_code = getattr(getattr(e, "response", None), "status_code", None)
            return VerificationResult(verified=False, status_code=status_code, detail=str(e))

        logger.debug("Verification result: %s / %s", response.status_code, data)
        if not isinstance(data, dict):
            return VerificationResult(
                verified=False, status_code=response.status_code, detail=str(data)
            )
        if str(data.get("status")) != "1":
            detail = data.get("result") or data.get("message")
            return VerificationResult(
                verified=False, status_code=response.status_code, detail=str(detail)
            )
        return VerificationResult(
            verified=True, status_code=response.status_code, detail=str(data.get("result"))
        )
