"""Interactive CLI simulator: exercise the OTP flow without Redis or vendors."""

import asyncio

from otp_gateway.channels.base import BaseChannel, DeliveryOutcome, OutboundMessage
from otp_gateway.channels.registry import EMAIL, SMS, ChannelRegistry
from otp_gateway.config import OTPPolicy, settings
from otp_gateway.otp.engine import OTPEngine
from otp_gateway.store.memory import MemorySecretStore

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"


class ConsoleChannel(BaseChannel):
    """Prints messages instead of sending them."""

    def __init__(self, label: str) -> None:
        self._label = label

    @property
    def name(self) -> str:
        return f"Console{self._label}"

    async def deliver(self, identifier: str, message: OutboundMessage) -> DeliveryOutcome:
        print(f"{CYAN}{BOLD}[{self._label} → {identifier}]{RESET} {message.text}")
        return DeliveryOutcome(True, f"Printed via {self.name}")


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print("  🔐  OTP Gateway · Simulator")
    print(f"{'=' * 52}{RESET}\n")

    print(f"{DIM}Commands:  send sms <phone> | send email <address>{RESET}")
    print(f"{DIM}           verify <identifier> <code> | status <identifier> | quit{RESET}\n")

    registry = ChannelRegistry()
    registry.set_channel(SMS, ConsoleChannel("SMS"))
    registry.set_channel(EMAIL, ConsoleChannel("Email"))
    store = MemorySecretStore()
    engine = OTPEngine(
        store=store,
        registry=registry,
        policy=OTPPolicy.from_settings(settings),
        brand_name=settings.brand_name,
    )

    while True:
        try:
            user_input = input(f"{BLUE}{BOLD}>{RESET} ").strip()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if not user_input:
            continue

        parts = user_input.split()
        command = parts[0].lower()

        if command == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        if command == "send" and len(parts) == 3:
            result = await engine.issue(parts[1].lower(), parts[2])
            color = GREEN if result.accepted else YELLOW
            print(f"{color}{result.status.value}:{RESET} {result.message}\n")
        elif command == "verify" and len(parts) == 3:
            result = await engine.verify(parts[1], parts[2])
            color = GREEN if result.verified else YELLOW
            print(f"{color}{result.status.value}:{RESET} {result.message}\n")
        elif command == "status" and len(parts) == 2:
            identifier = parts[1]
            attempts = await engine.records.attempt_count(identifier)
            sent = await engine.records.rate_count(identifier)
            live = await engine.records.lookup(identifier) is not None
            print(
                f"{DIM}live code: {live} · failed attempts: {attempts or 0}"
                f"/{engine.policy.max_attempts} · sent this window: {sent}"
                f"/{engine.policy.max_per_window}{RESET}\n"
            )
        else:
            print(f"{YELLOW}Unrecognised command{RESET}\n")


if __name__ == "__main__":
    asyncio.run(main())
