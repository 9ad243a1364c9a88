"""Casos de uso da aplicação."""

from .sync_listings import SyncListingsUseCase, SyncPlan, compute_diff

__all__ = [
    "SyncListingsUseCase",
    "SyncPlan",
    "compute_diff",
]
