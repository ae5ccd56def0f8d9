"""Environment configuration for superstar-deployments library."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .constants import (
    ENV_ARTIFACT_PATH,
    ENV_CHAIN,
    ENV_CODE_ID,
    ENV_CONTRACT_ADDR,
    ENV_GAS_PRICE,
    ENV_LOG_JSON,
    ENV_LOG_LEVEL,
    ENV_MNEMONIC,
    ENV_NOIS_PROXY,
    ENV_TRANSPORT,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Values read from the environment, all optional until a command needs them."""

    mnemonic: Optional[str] = field(default=None, repr=False)
    network: Optional[str] = None
    code_id: Optional[str] = None
    contract_address: Optional[str] = None
    gas_price: Optional[str] = None
    nois_proxy: Optional[str] = None
    artifact_path: Optional[str] = None
    transport: Optional[str] = None
    log_level: str = "INFO"
    log_json: bool = False


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name, "").strip()
    return value or None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings with blank variables treated as unset
    """
    if environ is None:
        environ = os.environ

    return Settings(
        mnemonic=_get(environ, ENV_MNEMONIC),
        network=_get(environ, ENV_CHAIN),
        code_id=_get(environ, ENV_CODE_ID),
        contract_address=_get(environ, ENV_CONTRACT_ADDR),
        gas_price=_get(environ, ENV_GAS_PRICE),
        nois_proxy=_get(environ, ENV_NOIS_PROXY),
        artifact_path=_get(environ, ENV_ARTIFACT_PATH),
        transport=_get(environ, ENV_TRANSPORT),
        log_level=_get(environ, ENV_LOG_LEVEL) or "INFO",
        log_json=(_get(environ, ENV_LOG_JSON) or "").lower() in _TRUE_VALUES,
    )
