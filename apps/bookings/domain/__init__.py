"""Framework-free booking rules: lifecycle, availability, pricing helpers."""
