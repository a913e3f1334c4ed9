"""Remote transports for backup manifests."""

from crateback.remote.gist import GistClient, RemoteError

__all__ = ["GistClient", "RemoteError"]
