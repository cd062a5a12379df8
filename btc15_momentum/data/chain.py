"""
On-chain readers: Chainlink BTC/USD price and USDC balance on Polygon.
"""

from web3 import Web3

from btc15_momentum.core.config import Config

AGGREGATOR_ABI = [
    {
        "inputs": [],
        "name": "latestRoundData",
        "outputs": [
            {"name": "roundId", "type": "uint80"},
            {"name": "answer", "type": "int256"},
            {"name": "startedAt", "type": "uint256"},
            {"name": "updatedAt", "type": "uint256"},
            {"name": "answeredInRound", "type": "uint80"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_ABI = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def connect(config: Config) -> Web3:
    """HTTP provider for the configured RPC endpoint."""
    return Web3(Web3.HTTPProvider(
        config.chain.rpc_url,
        request_kwargs={"timeout": config.chain.rpc_timeout_sec},
    ))


def scale_units(raw: int, decimals: int) -> float:
    return raw / (10 ** decimals)


class ChainlinkFeedReader:
    """Latest answer of a Chainlink aggregator."""

    def __init__(self, w3: Web3, feed_address: str):
        self.contract = w3.eth.contract(
            address=Web3.to_checksum_address(feed_address), abi=AGGREGATOR_ABI
        )

    def get_current_price(self) -> float:
        decimals = self.contract.functions.decimals().call()
        _, answer, _, _, _ = self.contract.functions.latestRoundData().call()
        return scale_units(answer, decimals)


class UsdcBalanceReader:
    """ERC-20 balance in whole token units."""

    def __init__(self, w3: Web3, token_address: str):
        self.contract = w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI
        )

    def get_balance(self, account: str) -> float:
        decimals = self.contract.functions.decimals().call()
        raw = self.contract.functions.balanceOf(Web3.to_checksum_address(account)).call()
        return scale_units(raw, decimals)
