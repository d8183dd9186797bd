"""Infrastructure layer: OVH API client and handler registry."""
