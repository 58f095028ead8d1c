class BiomedynError(Exception):
    """Base class for errors raised by biomedyn"""


class ConfigurationError(BiomedynError, ValueError):
    """An inference parameter is outside its accepted values. Raised before any computation starts
    """


class DataError(BiomedynError, ValueError):
    """The abundance matrix or its metadata cannot be used as given, ex. non-positive abundances
    or samples missing from the metadata
    """
