"""HTTP helpers shared by the API apps."""
