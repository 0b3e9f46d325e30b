"""
Storage components.

Components:
- EcrRepositoryComponent: Container registry and lifecycle policy
"""

from IAC.components.storage.ecr_repository import EcrRepositoryComponent, EcrRepositoryOutputs

__all__ = [
    "EcrRepositoryComponent",
    "EcrRepositoryOutputs",
]
