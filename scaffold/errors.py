class CollectionFormatError(ValueError):
    """The collection document is missing a structure the run cannot do without."""


class ConfigError(ValueError):
    """A configuration value is missing or has the wrong shape."""
