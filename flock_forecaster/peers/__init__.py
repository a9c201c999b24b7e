"""
Peer-lot comparison: read-only sources of category averages.

Modules
-------
provider      : PeerAverageProvider protocol, static and lot-history
                providers, fetch_peer_averages_safely() boundary wrapper.
http_provider : HttpPeerAverageProvider — httpx client with timeout and one
                bounded retry.
"""
