"""Cofre de credenciais."""

from mobile_backend.infrastructure.credentials.vault import InMemoryCredentialVault

__all__ = ["InMemoryCredentialVault"]
