"""Core business logic layer (pure, storage-free).

Modules:
- list_view: search / filter / sort over an in-memory recipe collection
- suggestions: random weekly meal plan generator
- healthier: rule-based healthier ingredient swaps
"""
__all__ = ["list_view", "suggestions", "healthier"]
