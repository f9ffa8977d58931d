from .unit_of_work import UnitOfWork
from .session_tokens import issue_token, decode_token, InvalidSessionToken

__all__ = [
    "UnitOfWork",
    "issue_token",
    "decode_token",
    "InvalidSessionToken",
]
