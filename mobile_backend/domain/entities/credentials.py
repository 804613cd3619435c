"""
Entidade de credencial em cache - usada apenas para re-login silencioso.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CredentialRecord:
    """
    Senha cifrada de um usuário TOTVS.

    Nunca guarda texto plano: apenas o ciphertext e o IV, ambos em hex.
    """

    login: str
    encrypted_password: str
    iv: str
    stored_at: datetime = field(default_factory=datetime.now)
