from typing import Optional

import attrs


@attrs.frozen
class TransactionRequest:
    to: str
    data: str  # 0x-prefixed call data
    from_address: Optional[str] = None
    gas: Optional[int] = None
    value: int = 0

    def with_gas(self, gas: int) -> 'TransactionRequest':
        return attrs.evolve(self, gas=gas)

    def to_rpc_params(self) -> dict:
        params: dict = {'to': self.to, 'data': self.data}
        if self.from_address:
            params['from'] = self.from_address
        if self.gas is not None:
            params['gas'] = hex(self.gas)
        if self.value:
            params['value'] = hex(self.value)
        return params


@attrs.frozen
class TransactionReceipt:
    transaction_hash: str
    block_number: int
    succeeded: bool = True
