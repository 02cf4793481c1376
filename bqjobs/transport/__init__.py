"""Transport collaborator contract.

The transport owns HTTP, authentication, serialization and the pagination
wire format. Job snapshots only hold a reference to one.
"""

from .base import Transport, TransportResponse

__all__ = ["Transport", "TransportResponse"]
