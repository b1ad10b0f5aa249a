class UtmTidyError(Exception):
    pass

class ConfigError(UtmTidyError):
    pass

class InvalidRulesetError(ConfigError):
    """Ruleset data failed validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid ruleset: " + "; ".join(self.errors))

class PipelineError(UtmTidyError):
    pass

class ExportError(UtmTidyError):
    """Export format unknown or serialization failed."""
    pass

class StorageError(UtmTidyError):
    pass

class DraftNotFoundError(StorageError):
    """Draft id is unknown or its TTL has elapsed."""
    pass
