"""HTTP surface of the menucom payments service."""
