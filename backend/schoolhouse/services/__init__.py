"""Contract workflows built on the repository and the tuition calculator."""
