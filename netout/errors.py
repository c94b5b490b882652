"""Exception taxonomy for the export pipeline.

None of these escape into the host program: sinks wrap them in a
DeliveryResult and the pipeline logs them.
"""


class NetOutError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(NetOutError):
    """A configured sink could not be set up (e.g. unopenable file)."""


class DeliveryError(NetOutError):
    """A rendered record could not be delivered."""


class StreamWriteError(DeliveryError):
    """Writing to the bound stream or file failed."""


class NetworkError(DeliveryError):
    """The HTTP transport failed before the request completed."""
