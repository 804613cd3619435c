"""
Entidades de domínio.
"""

from mobile_backend.domain.entities.credentials import CredentialRecord
from mobile_backend.domain.entities.fractioning import (
    BOX_RESPONSE_DEFAULT,
    LIST_RESPONSE_DEFAULT,
    FractioningBoxResponse,
)
from mobile_backend.domain.entities.totvs import (
    LOGIN_SUCCESS_SENTINEL,
    ClassifiedResponse,
    ResponseClass,
    TotvsLoginResponse,
)

__all__ = [
    "BOX_RESPONSE_DEFAULT",
    "LIST_RESPONSE_DEFAULT",
    "ClassifiedResponse",
    "CredentialRecord",
    "FractioningBoxResponse",
    "LOGIN_SUCCESS_SENTINEL",
    "ResponseClass",
    "TotvsLoginResponse",
]
