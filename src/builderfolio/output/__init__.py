"""Output layer — renders ServiceResult for humans (rich) or machines (JSON)."""
