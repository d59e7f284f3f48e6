from typing import Optional

import attrs


@attrs.frozen
class NetworkStatus:
    on_expected_network: bool
    current_chain_id: Optional[int]
    expected_chain_id: int
