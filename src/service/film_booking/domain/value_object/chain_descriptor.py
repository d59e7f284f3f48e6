import attrs


@attrs.frozen
class ChainDescriptor:
    """Network description handed to the wallet when it does not know the chain yet"""

    chain_id: int
    chain_name: str
    rpc_urls: tuple[str, ...]
    block_explorer_urls: tuple[str, ...]
    currency_name: str = 'ETH'
    currency_symbol: str = 'ETH'
    currency_decimals: int = 18

    @property
    def hex_chain_id(self) -> str:
        return hex(self.chain_id)

    def to_rpc_params(self) -> dict:
        return {
            'chainId': self.hex_chain_id,
            'chainName': self.chain_name,
            'nativeCurrency': {
                'name': self.currency_name,
                'symbol': self.currency_symbol,
                'decimals': self.currency_decimals,
            },
            'rpcUrls': list(self.rpc_urls),
            'blockExplorerUrls': list(self.block_explorer_urls),
        }
