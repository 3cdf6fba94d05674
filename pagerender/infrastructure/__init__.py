"""Infrastructure adapters: codec, rasterization and response packaging."""
