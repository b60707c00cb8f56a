# rwa_registry/services/conduit_check.py
import logging
from typing import Dict, Optional

from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from ..config.abis import RWA_URN_ABI
from ..models.errors import ConduitCheckFailed, ConduitMismatch
from ..models.identifiers import Bytes32
from ..models.registry_model import Component

logger = logging.getLogger(__name__)

URN = Bytes32.from_text("urn")
OUTPUT_CONDUIT = Bytes32.from_text("outputConduit")


class UrnConduitCheck:
    """
    Validator hook for ``RwaRegistry.add`` with components.

    When a deal is added with both an ``urn`` and an ``outputConduit``, the
    urn contract is asked for its ``outputConduit()`` and the answer must
    match the supplied component address.
    """

    def __init__(self, w3: Web3):
        self.w3 = w3

    def get_output_conduit(self, urn_address: str) -> Optional[str]:
        """Reads ``outputConduit()`` from the urn; None when the call reverts.

        Transport and provider failures propagate.
        """
        contract = self.w3.eth.contract(address=self.w3.to_checksum_address(urn_address), abi=RWA_URN_ABI)
        try:
            return contract.functions.outputConduit().call()
        except (ContractLogicError, ValueError) as e:
            logger.warning("outputConduit() failed on urn %s: %s", urn_address, e)
            return None

    def __call__(self, deal_id: Bytes32, components: Dict[Bytes32, Component]) -> None:
        urn = components.get(URN)
        conduit = components.get(OUTPUT_CONDUIT)
        if urn is None or conduit is None:
            return

        try:
            reported = self.get_output_conduit(urn.addr)
        except (OSError, Web3Exception) as e:
            logger.error("Could not query urn %s for deal %s: %s", urn.addr, deal_id, e)
            raise ConduitCheckFailed(deal_id, urn.addr, e) from e
        if reported is None or self.w3.to_checksum_address(reported) != conduit.addr:
            raise ConduitMismatch(deal_id, conduit.addr, reported)
        logger.debug("Urn %s output conduit matches %s", urn.addr, conduit.addr)
