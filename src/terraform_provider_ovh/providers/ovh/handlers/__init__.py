"""OVH resource and data source handlers."""
