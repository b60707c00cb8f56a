"""Environment-driven settings for the CLI and the on-chain cross-check."""

import os
from dotenv import load_dotenv

load_dotenv()

RPC_URL = os.environ.get("RPC_URL")

# JSON snapshot used by the CLI between invocations
REGISTRY_STATE_PATH = os.environ.get("REGISTRY_STATE_PATH", "registry_state.json")

# Caller identity for CLI commands (either one is enough)
REGISTRY_CALLER = os.environ.get("REGISTRY_CALLER")
PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
