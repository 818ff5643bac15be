from infoco.models.state import StateEntry  # noqa: F401
