# batchmint/config.py
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import load_dotenv

load_dotenv()


class ConfigError(ValueError):
    """Raised when the environment cannot produce a usable configuration."""


def _env(name: str, default: str = "", environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    v = (env.get(name) or default).strip()
    return v

def _env_float(name: str, default: float, environ: Optional[Mapping[str, str]] = None) -> float:
    v = _env(name, environ=environ)
    try:
        return float(v) if v else float(default)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {v!r}")

def _env_int(name: str, default: int, environ: Optional[Mapping[str, str]] = None) -> int:
    v = _env(name, environ=environ)
    try:
        return int(v) if v else int(default)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {v!r}")

def _env_bool(name: str, default: bool, environ: Optional[Mapping[str, str]] = None) -> bool:
    v = _env(name, environ=environ)
    if not v:
        return default
    return v.lower() in ("1","true","yes","y","on")


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Arbitrum One, as the minter was first run against
DEFAULT_CHAIN_ID = 42161
DEFAULT_NETWORK_NAME = "Arbitrum One"
DEFAULT_CURRENCY = "ETH"
DEFAULT_RPC_URL = "https://arbitrum.llamarpc.com/"
DEFAULT_EXPLORER_URL = "https://arbiscan.io/tx/"

# 2025-01-15 16:59:59 UTC
DEFAULT_TARGET_TIMESTAMP_MS = 1736960399000


@dataclass(frozen=True)
class Settings:
    contract_address: str
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    network_name: str = DEFAULT_NETWORK_NAME
    currency: str = DEFAULT_CURRENCY
    explorer_url: str = DEFAULT_EXPLORER_URL
    gas_multiplier: float = 1.5
    priority_fee_wei: int = 1_500_000
    gas_limit: Optional[int] = None

    mint_amount: int = 1
    mint_id: int = 3
    affiliate: str = ZERO_ADDRESS

    target_timestamp_ms: int = DEFAULT_TARGET_TIMESTAMP_MS
    attempts_per_wallet: int = 10
    key_prefix: str = "PRIVATE_KEY"

    rpc_timeout: float = 30.0
    receipt_timeout: float = 120.0
    max_iterations: int = 0  # 0 = run forever
    iteration_pause: float = 0.0


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    contract = _env("CONTRACT_ADDRESS", environ=environ)
    if not contract:
        raise ConfigError("CONTRACT_ADDRESS required (.env)")

    attempts = _env_int("ATTEMPTS_PER_WALLET", 10, environ)
    if attempts < 1:
        raise ConfigError(f"ATTEMPTS_PER_WALLET must be >= 1, got {attempts}")

    gas_limit = _env_int("GAS_LIMIT", 0, environ)

    return Settings(
        contract_address=contract,
        rpc_url=_env("RPC_URL", DEFAULT_RPC_URL, environ),
        chain_id=_env_int("CHAIN_ID", DEFAULT_CHAIN_ID, environ),
        network_name=_env("NETWORK_NAME", DEFAULT_NETWORK_NAME, environ),
        currency=_env("CURRENCY", DEFAULT_CURRENCY, environ),
        explorer_url=_env("EXPLORER_URL", DEFAULT_EXPLORER_URL, environ),
        gas_multiplier=_env_float("GAS_MULTIPLIER", 1.5, environ),
        priority_fee_wei=_env_int("PRIORITY_FEE_WEI", 1_500_000, environ),
        gas_limit=gas_limit or None,
        mint_amount=_env_int("MINT_AMOUNT", 1, environ),
        mint_id=_env_int("MINT_ID", 3, environ),
        affiliate=_env("AFFILIATE", ZERO_ADDRESS, environ),
        target_timestamp_ms=_env_int("TARGET_TIMESTAMP_MS", DEFAULT_TARGET_TIMESTAMP_MS, environ),
        attempts_per_wallet=attempts,
        key_prefix=_env("KEY_PREFIX", "PRIVATE_KEY", environ),
        rpc_timeout=_env_float("RPC_TIMEOUT", 30, environ),
        receipt_timeout=_env_float("RECEIPT_TIMEOUT", 120, environ),
        max_iterations=_env_int("MAX_ITERATIONS", 0, environ),
        iteration_pause=_env_float("ITERATION_PAUSE", 0, environ),
    )


# ---- Logging flags ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()  # DEBUG/INFO/WARN/ERROR
LOG_COLOR = os.getenv("LOG_COLOR", "1") not in ("0","false","False")
LOG_JSON  = os.getenv("LOG_JSON", "0") in ("1","true","True")
DEBUG     = os.getenv("DEBUG", "0") in ("1","true","True")
