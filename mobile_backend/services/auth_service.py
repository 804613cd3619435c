"""
Serviço de Autenticação.

Valida o usuário no TOTVS e mantém a senha no cofre para que o
cliente TOTVS consiga refazer o login quando a sessão expirar.
"""

from mobile_backend.core.logging import get_logger
from mobile_backend.core.security import mask_login
from mobile_backend.domain.interfaces import ICredentialVault, ITotvsClient

logger = get_logger(__name__)


class AuthService:
    """
    Orquestra login/logout no TOTVS.

    Não emite tokens: a sessão do app (JWT) é responsabilidade de
    outra camada. Aqui só existe a sessão remota.
    """

    def __init__(
        self,
        totvs_client: ITotvsClient,
        credential_vault: ICredentialVault,
    ):
        """
        Inicializa serviço com dependências injetadas.

        Args:
            totvs_client: Cliente TOTVS
            credential_vault: Cofre de credenciais para re-login
        """
        self.totvs = totvs_client
        self.vault = credential_vault

    async def login(self, username: str, password: str) -> dict[str, str]:
        """
        Autentica no TOTVS e guarda a senha para re-login silencioso.

        Returns:
            Dicionário com login e nome do usuário.

        Raises:
            TotvsAuthenticationError: Credenciais recusadas.
        """
        logger.debug("Login solicitado", login=mask_login(username))

        response = await self.totvs.login(username, password)

        # Sobrescreve qualquer senha anterior do mesmo login
        await self.vault.store(username, password)

        logger.info("Usuário autenticado", login=mask_login(username))

        return {
            "login": username,
            "nome": response.nome or username,
        }

    async def logout(self, login: str) -> None:
        """
        Esquece a senha do usuário.

        O jar de cookies não é limpo: a sessão remota é compartilhada
        pelo processo e pode estar em uso por outros usuários.
        """
        await self.vault.delete(login)
        logger.info("Logout realizado", login=mask_login(login))
