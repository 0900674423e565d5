"""Document parsing use cases."""
