# rwa_registry/controllers/registry_controller.py
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..cli.view import View
from ..models.errors import RegistryError
from ..models.registry_model import RwaRegistry, Validator
from ..services.snapshot_store import load_registry, save_registry

logger = logging.getLogger(__name__)


def parse_component_spec(spec: str) -> Tuple[str, str, int]:
    """Parse ``name=0xADDRESS:variant`` as given on the command line."""
    try:
        name, rest = spec.split("=", 1)
        addr, variant = rest.rsplit(":", 1)
        return name.strip(), addr.strip(), int(variant)
    except ValueError:
        raise ValueError(f"Invalid component '{spec}', expected name=0xADDRESS:variant")


class RegistryController:
    """Runs registry commands against a JSON-persisted registry."""

    def __init__(self, view: View, state_path, caller: Optional[str] = None,
                 validators: Optional[Sequence[Validator]] = None):
        self.view = view
        self.state_path = Path(state_path)
        self.caller = caller
        self.validators = list(validators or [])

    # --- Helpers ---

    def _load(self) -> RwaRegistry:
        self.view.display_verbose(f"Loading registry state from {self.state_path}")
        return load_registry(self.state_path, validators=self.validators)

    def _require_caller(self) -> str:
        if not self.caller:
            raise ValueError("No caller configured (use --caller, REGISTRY_CALLER or PRIVATE_KEY)")
        return self.caller

    def _run(self, action, mutating: bool = False) -> bool:
        """Loads the registry, runs ``action`` and persists the result if it mutated."""
        try:
            registry = self._load()
            action(registry)
            if mutating:
                save_registry(registry, self.state_path)
                self.view.display_verbose(f"Saved registry state to {self.state_path}")
            return True
        except FileNotFoundError:
            self.view.display_error(f"No registry state at {self.state_path} (run 'init' first)")
        except (RegistryError, ValueError) as e:
            self.view.display_error(str(e))
        return False

    # --- Commands ---

    def init(self, owner: Optional[str] = None, allow_zero_address: bool = False, force: bool = False) -> bool:
        if self.state_path.exists() and not force:
            self.view.display_error(f"{self.state_path} already exists (use --force to overwrite)")
            return False
        try:
            owner = owner or self._require_caller()
            registry = RwaRegistry(owner, require_nonzero_address=not allow_zero_address)
        except (RegistryError, ValueError) as e:
            self.view.display_error(str(e))
            return False
        save_registry(registry, self.state_path)
        self.view.display_success(f"Registry created at {self.state_path} with ward {registry.events[0].usr}")
        return True

    def rely(self, account: str) -> bool:
        def action(registry):
            registry.rely(account, caller=self._require_caller())
            self.view.display_success(f"{account} is now a ward")
        return self._run(action, mutating=True)

    def deny(self, account: str) -> bool:
        def action(registry):
            registry.deny(account, caller=self._require_caller())
            self.view.display_success(f"{account} is no longer a ward")
        return self._run(action, mutating=True)

    def show_supported(self) -> bool:
        return self._run(lambda registry: self.view.display_names(
            "Supported components", registry.list_supported_components()))

    def add_supported(self, name: str) -> bool:
        def action(registry):
            registry.add_supported_component(name, caller=self._require_caller())
            self.view.display_success(f"Component '{name}' is now supported")
        return self._run(action, mutating=True)

    def list_deals(self) -> bool:
        return self._run(lambda registry: self.view.display_names("Deals", registry.list()))

    def iter_deals(self, start: int, end: int) -> bool:
        return self._run(lambda registry: self.view.display_names("Deals", registry.iter(start, end), start))

    def show_deal(self, deal_id: str) -> bool:
        def action(registry):
            info = registry.deal_info(deal_id)
            components = registry.list_components(deal_id) if registry.has(deal_id) else None
            self.view.display_deal(deal_id, info, components)
        return self._run(action)

    def add_deal(self, deal_id: str, component_specs: Optional[List[str]] = None) -> bool:
        def action(registry):
            caller = self._require_caller()
            if component_specs:
                parsed = [parse_component_spec(spec) for spec in component_specs]
                names, addresses, variants = (list(col) for col in zip(*parsed))
                registry.add(deal_id, names, addresses, variants, caller=caller)
            else:
                registry.add(deal_id, caller=caller)
            self.view.display_success(f"Deal {deal_id} added at position {registry.deal_info(deal_id).pos}")
        return self._run(action, mutating=True)

    def finalize(self, deal_id: str) -> bool:
        def action(registry):
            registry.finalize(deal_id, caller=self._require_caller())
            self.view.display_success(f"Deal {deal_id} finalized")
        return self._run(action, mutating=True)

    def remove(self, deal_id: str) -> bool:
        def action(registry):
            registry.remove(deal_id, caller=self._require_caller())
            self.view.display_success(f"Deal {deal_id} removed")
        return self._run(action, mutating=True)

    def set_component(self, deal_id: str, name: str, addr: str, variant: int) -> bool:
        def action(registry):
            registry.set_component(deal_id, name, addr, variant, caller=self._require_caller())
            self.view.display_success(f"{deal_id}.{name} set to {addr} (variant {variant})")
        return self._run(action, mutating=True)

    def file(self, deal_id: str, what: str, name: str, addr: str, variant: int) -> bool:
        def action(registry):
            registry.file(deal_id, what, name, addr, variant, caller=self._require_caller())
            self.view.display_success(f"{deal_id}.{name} filed as {addr} (variant {variant})")
        return self._run(action, mutating=True)

    def remove_component(self, deal_id: str, name: str) -> bool:
        def action(registry):
            registry.remove_component(deal_id, name, caller=self._require_caller())
            self.view.display_success(f"{deal_id}.{name} removed")
        return self._run(action, mutating=True)

    def get_component(self, deal_id: str, name: str) -> bool:
        def action(registry):
            addr, variant = registry.get_component(deal_id, name)
            self.view.display_component(deal_id, name, addr, variant)
        return self._run(action)
