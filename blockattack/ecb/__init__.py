"""ECB mode, detection and attacks."""
