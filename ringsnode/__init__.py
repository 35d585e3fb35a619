"""JSON-RPC client, configuration, seed loading and peer measurement for a peer-to-peer node."""

__version__ = "0.1.0"