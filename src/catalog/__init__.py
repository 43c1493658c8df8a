"""Package descriptors and the catalogs that provide them."""
