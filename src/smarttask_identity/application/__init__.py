"""Application layer: use cases built on the identity domain."""
