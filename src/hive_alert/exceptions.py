class HiveAlertError(Exception):
    pass


class ConfigurationError(HiveAlertError):
    pass


class InvalidSnapshotError(HiveAlertError, ValueError):
    pass


class TransportError(HiveAlertError):
    def __init__(self, message: str = "Transport failure", status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
