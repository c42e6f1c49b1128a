"""Store inspector: list live OTP records grouped by kind, with their TTLs.

Only a truncated hash of each code is ever shown.
"""

import asyncio

from otp_gateway.config import settings
from otp_gateway.otp.records import ATTEMPTS_PREFIX, CODE_PREFIX, RATE_PREFIX
from otp_gateway.store.base import SecretStore
from otp_gateway.store.factory import build_store


def _fmt_ttl(seconds: int) -> str:
    if seconds < 0:
        return "no expiry"
    return f"{seconds // 60} min {seconds % 60} s"


async def _section(store: SecretStore, title: str, prefix: str, render) -> int:
    keys = sorted(await store.scan(prefix))
    if not keys:
        return 0
    print(f"\n{title}")
    print("=" * 60)
    for key in keys:
        value = await store.get(key)
        ttl = await store.ttl(key)
        if value is None:
            continue
        print(f"  {key[len(prefix):]:<32} {render(value):<24} expires in {_fmt_ttl(ttl)}")
    return len(keys)


async def inspect() -> None:
    """Print every OTP record currently held by the configured store."""
    store = build_store(settings)
    try:
        total = await _section(
            store, "🔐 ACTIVE OTPs", CODE_PREFIX, lambda v: f"hash {v[:16]}…"
        )
        total += await _section(
            store,
            "🔢 VERIFICATION ATTEMPTS",
            ATTEMPTS_PREFIX,
            lambda v: f"attempts {v}/{settings.otp_max_attempts}",
        )
        total += await _section(
            store,
            "⏱️  RATE LIMITS",
            RATE_PREFIX,
            lambda v: f"sent {v}/{settings.rate_limit_max_requests}",
        )
        if not total:
            print("📭 No OTP records (all codes verified or expired).")
        print()
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(inspect())
