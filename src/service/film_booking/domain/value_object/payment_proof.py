from typing import Optional

import attrs


@attrs.frozen
class PaymentProof:
    """On-chain evidence sent with a blockchain payment confirmation"""

    wallet_address: str
    transaction_hash: str
    block_index: Optional[int]

    def to_payload(self) -> dict:
        return {
            'walletAddress': self.wallet_address,
            'transactionHash': self.transaction_hash,
            'blockIndex': self.block_index,
        }
