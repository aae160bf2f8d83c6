"""Bridge layer between Stacksmith and the outside world.

Modules
-------
crypto_bridge
    BIP-39/BIP-32 key derivation and recoverable secp256k1 signing via
    ``eth-account`` and ``eth-keys``.
node_client
    Blocking HTTP client for a Stacks node's account and transaction
    endpoints, via ``requests``.

Everything on the far side of these modules (key libraries, the network)
is reached only through them, so tests can substitute fakes at this seam.
"""
