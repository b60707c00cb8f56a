from typing import Iterable, List, Optional

from rwa_registry.config.components import OPAQUE_VARIANT


class View:
    """Handles all console output and presentation."""

    def __init__(self, verbose=False):
        self.verbose = verbose

    def _format_variant(self, variant: int) -> str:
        if variant == OPAQUE_VARIANT:
            return "opaque"
        return str(variant)

    def display_names(self, title: str, names: Iterable, start: int = 0):
        """Prints an indexed list of identifiers."""
        names = list(names)
        print(f"\n=== {title} ({len(names)}) ===")
        for offset, name in enumerate(names):
            print(f"  [{start + offset}] {name}")

    def display_deal(self, deal_id, info, components: Optional[List] = None):
        """Prints a deal's status, position and components."""
        print(f"\n=== Deal {deal_id} ===")
        print(f"  Status:   {info.status.name}")
        print(f"  Position: {info.pos}")
        if components is None:
            return
        if not components:
            print("  Components: (none)")
            return
        print("  Components:")
        width = max(len(str(c.name)) for c in components)
        for c in components:
            print(f"    {str(c.name):<{width}}  {c.addr}  variant={self._format_variant(c.variant)}")

    def display_component(self, deal_id, name, addr: str, variant: int):
        print(f"{deal_id}.{name}: {addr} (variant {self._format_variant(variant)})")

    def display_success(self, message: str):
        print(f"✅ {message}")

    def display_error(self, message: str):
        """Displays an error message."""
        print(f"❌ ERROR: {message}")

    def display_message(self, message: str):
        """Displays a general message."""
        print(message)

    def display_verbose(self, message: str):
        """Displays a message only if verbose mode is enabled."""
        if self.verbose:
            print(f"[VERBOSE] {message}")
