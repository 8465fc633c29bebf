# scripts/smoke.py
"""
Smoke walkthrough of the snapshot/rollback cycle.

Usage
-----
1. Run with a random seed:
    $ uv run python scripts/smoke.py

2. Reproducible run with a bounded history:
    $ uv run python scripts/smoke.py --seed 7 --capacity 3
"""

import argparse
import logging
import random
import string
import sys
from pathlib import Path

from dotenv import load_dotenv

from statehistory import HistoryEvent, StateOwner, create_history

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

INITIAL_STATE = "Super-duper-super-puper-super."


def _scramble(rng: random.Random, length: int = 30) -> str:
    return "".join(rng.choice(string.ascii_letters) for _ in range(length))


def _announce(event: HistoryEvent) -> None:
    print(f"  🔔 {event.kind}: #{event.entry.id} {event.entry.label}")


def main() -> None:
    """Execute the smoke walkthrough."""
    parser = argparse.ArgumentParser(description="Run the statehistory smoke walkthrough")
    parser.add_argument("--seed", type=int, default=None, help="Seed for labels and mutations")
    parser.add_argument("--capacity", type=int, default=None, help="Undo-stack bound")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    owner = StateOwner(INITIAL_STATE, rng=rng)
    history = create_history(owner, capacity=args.capacity)
    history.subscribe(_announce)
    print(f"\n📝 Initial state: {owner.value}")

    # 1. Mutate and capture three times
    for _ in range(3):
        owner.set(_scramble(rng))
        print(f"\n✏️  State changed to: {owner.value}")
        history.capture()

    # 2. Inspect history
    print("\n📜 History (most recent first):")
    for entry in history.history():
        print(f"  - #{entry.id}: {entry.label}")

    # 3. Roll back twice
    for attempt in ("Now, let's rollback!", "Once more!"):
        print(f"\n⏪ {attempt}")
        result = history.undo()
        if result.is_err():
            print(f"❌ {result.unwrap_err()}")
            continue
        print(f"  State restored to #{result.unwrap()}: {owner.value}")

    # 4. Roll forward once
    print("\n⏩ Redo")
    redone = history.redo()
    if redone.is_ok():
        print(f"  State re-applied from #{redone.unwrap()}: {owner.value}")
    else:
        print(f"❌ {redone.unwrap_err()}")

    print("\n" + "=" * 60)
    print(f"✅ Finished in state '{history.state.value}' (version {owner.version})")
    print("=" * 60)


if __name__ == "__main__":
    main()
