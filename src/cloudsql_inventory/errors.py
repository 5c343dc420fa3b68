class InventoryError(Exception):
    """Fatal error: aborts the whole run with a non-zero exit."""


class ProjectDiscoveryError(InventoryError):
    pass


class CredentialsError(InventoryError):
    pass


class ClientBuildError(InventoryError):
    pass


class ReportError(InventoryError):
    pass
