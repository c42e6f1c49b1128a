"""Select the secret-store backend from configuration."""

import logging

from otp_gateway.config import Settings
from otp_gateway.store.base import SecretStore
from otp_gateway.store.memory import MemorySecretStore
from otp_gateway.store.redis_store import RedisSecretStore

logger = logging.getLogger(__name__)


def build_store(s: Settings) -> SecretStore:
    """Create the store named by ``s.store_backend``."""
    backend = s.store_backend.lower()
    if backend == "memory":
        logger.warning("Using in-memory secret store; OTP state is lost on restart")
        return MemorySecretStore()
    if backend == "redis":
        logger.info("Using Redis secret store")
        return RedisSecretStore.from_url(s.redis_url)
    raise ValueError(f"Unknown store backend: {s.store_backend!r}")
