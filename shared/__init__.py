"""
Shared Kernel

Cross-cutting helpers used by every marketplace app: best-effort side
effects, caching, bot protection, pagination and the API error contract.
"""
