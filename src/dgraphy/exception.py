class DgraphyError(Exception):
    """Base exception for all dgraphy errors"""

    pass


class TransportError(DgraphyError):
    """Raised by a client when the network or the server fails a call"""

    pass
