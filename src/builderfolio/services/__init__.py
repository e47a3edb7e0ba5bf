"""Service layer — orchestration and business rules over the workspace.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
