from photonctl.http.retry import RetryPolicy
from photonctl.http.transport import PhotonTransport, TokenProvider

__all__ = ["PhotonTransport", "RetryPolicy", "TokenProvider"]
