"""
Cofre de credenciais TOTVS em memória.

Guarda a senha que o usuário informou no login para permitir
re-login silencioso quando a sessão TOTVS expira. O conteúdo vive
apenas durante o processo; nada é gravado em disco ou banco.

NOTA: a chave é única para todos os registros e derivada do
SECRET_KEY. Quem obtiver o segredo e um dump de memória recupera
todas as senhas. Ver DESIGN.md (envelope encryption / refresh token).
"""

import os
import threading

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from mobile_backend.core.logging import get_logger
from mobile_backend.core.security import mask_login
from mobile_backend.domain.entities import CredentialRecord
from mobile_backend.domain.interfaces import ICredentialVault

logger = get_logger(__name__)

KEY_SIZE_BYTES = 32  # AES-256
IV_SIZE_BYTES = 16  # bloco AES
_HKDF_INFO = b"mobile-backend/totvs-credential-vault"


def derive_vault_key(secret: str) -> bytes:
    """Deriva a chave AES-256 do segredo da implantação."""
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE_BYTES,
        salt=None,
        info=_HKDF_INFO,
    )
    return hkdf.derive(secret.encode("utf-8"))


class InMemoryCredentialVault(ICredentialVault):
    """
    Cofre AES-256-CBC com IV aleatório por cifragem.

    Decifragem que falha (ciphertext corrompido ou de outra chave)
    é tratada como credencial ausente, nunca como erro.
    """

    def __init__(self, secret: str):
        self._key = derive_vault_key(secret)
        self._records: dict[str, CredentialRecord] = {}
        self._lock = threading.Lock()

    def _encrypt(self, plaintext: str) -> tuple[str, str]:
        iv = os.urandom(IV_SIZE_BYTES)

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return ciphertext.hex(), iv.hex()

    def _decrypt(self, ciphertext_hex: str, iv_hex: str) -> str:
        decryptor = Cipher(
            algorithms.AES(self._key),
            modes.CBC(bytes.fromhex(iv_hex)),
        ).decryptor()
        padded = decryptor.update(bytes.fromhex(ciphertext_hex)) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()

        return data.decode("utf-8")

    async def store(self, login: str, password: str) -> None:
        """Cifra e grava (ou substitui) a senha do login."""
        encrypted, iv = self._encrypt(password)

        with self._lock:
            self._records[login] = CredentialRecord(
                login=login,
                encrypted_password=encrypted,
                iv=iv,
            )

        logger.debug("Credencial armazenada", login=mask_login(login))

    async def get(self, login: str) -> str | None:
        with self._lock:
            record = self._records.get(login)

        if record is None:
            return None

        try:
            return self._decrypt(record.encrypted_password, record.iv)
        except ValueError:
            # hex inválido, padding inválido ou UTF-8 inválido
            logger.warning(
                "Credencial armazenada não pôde ser decifrada",
                login=mask_login(login),
            )
            return None

    async def delete(self, login: str) -> None:
        with self._lock:
            self._records.pop(login, None)

        logger.debug("Credencial removida", login=mask_login(login))

    async def clear(self) -> None:
        with self._lock:
            self._records.clear()

        logger.info("Cofre de credenciais limpo")
