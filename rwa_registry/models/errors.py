"""Typed rejections raised by the registry.

Every error aborts the call that raised it; the registry state is left exactly
as it was before the call.
"""


class RegistryError(Exception):
    """Base class for all registry rejections."""


class Unauthorized(RegistryError):
    def __init__(self, caller):
        super().__init__(f"Unauthorized: {caller} is not a ward")
        self.caller = caller


class InvalidAccount(RegistryError):
    def __init__(self, account):
        super().__init__(f"Invalid account address: {account!r}")
        self.account = account


class ComponentAlreadySupported(RegistryError):
    def __init__(self, name):
        super().__init__(f"Component '{name}' is already supported")
        self.name = name


class UnsupportedComponent(RegistryError):
    def __init__(self, name):
        super().__init__(f"Component '{name}' is not supported")
        self.name = name


class DealAlreadyExists(RegistryError):
    def __init__(self, deal_id):
        super().__init__(f"Deal '{deal_id}' already exists")
        self.deal_id = deal_id


class DealDoesNotExist(RegistryError):
    def __init__(self, deal_id):
        super().__init__(f"Deal '{deal_id}' does not exist")
        self.deal_id = deal_id


class DealNotActive(RegistryError):
    def __init__(self, deal_id, status=None):
        message = f"Deal '{deal_id}' is not active"
        if status is not None:
            message += f" (status: {status.name})"
        super().__init__(message)
        self.deal_id = deal_id
        self.status = status


class MissingDeal(DealDoesNotExist, DealNotActive):
    """A call that needs an ACTIVE deal named one that does not exist."""

    def __init__(self, deal_id):
        RegistryError.__init__(self, f"Deal '{deal_id}' does not exist")
        self.deal_id = deal_id
        self.status = None


class DealHasDanglingComponents(RegistryError):
    def __init__(self, deal_id, count):
        super().__init__(f"Deal '{deal_id}' still has {count} component(s) attached")
        self.deal_id = deal_id
        self.count = count


class ComponentDoesNotExist(RegistryError):
    def __init__(self, deal_id, name):
        super().__init__(f"Component '{name}' does not exist for deal '{deal_id}'")
        self.deal_id = deal_id
        self.name = name


class InvalidComponentAddress(RegistryError):
    def __init__(self, name, address):
        super().__init__(f"Invalid address for component '{name}': {address!r}")
        self.name = name
        self.address = address


class InvalidVariant(RegistryError):
    def __init__(self, name, variant):
        super().__init__(f"Invalid variant for component '{name}': {variant!r}")
        self.name = name
        self.variant = variant


class MismatchingComponentParams(RegistryError):
    def __init__(self, names_len, addresses_len, variants_len):
        super().__init__(
            f"Component params length mismatch: names={names_len}, "
            f"addresses={addresses_len}, variants={variants_len}"
        )


class InvalidIteration(RegistryError):
    def __init__(self, start, end):
        super().__init__(f"Invalid iteration range: start={start}, end={end}")
        self.start = start
        self.end = end


class UnknownParameter(RegistryError):
    def __init__(self, what):
        super().__init__(f"Unknown parameter '{what}'")
        self.what = what


class ConduitCheckFailed(RegistryError):
    """The urn could not be queried (RPC transport or provider failure)."""

    def __init__(self, deal_id, urn, reason):
        super().__init__(f"Could not read outputConduit() from urn {urn} for deal '{deal_id}': {reason}")
        self.deal_id = deal_id
        self.urn = urn
        self.reason = reason


class ConduitMismatch(RegistryError):
    """Raised by the urn/output-conduit cross-check."""

    def __init__(self, deal_id, expected, actual):
        super().__init__(
            f"Output conduit mismatch for deal '{deal_id}': urn reports {actual}, "
            f"component is {expected}"
        )
        self.deal_id = deal_id
        self.expected = expected
        self.actual = actual
