import secrets
from typing import Protocol, runtime_checkable

MIN_TOKEN_LENGTH = 40


@runtime_checkable
class TokenGenerator(Protocol):
    def __call__(self) -> str: ...


class SecureTokenGenerator:
    """Fixed-length hex identifiers drawn from the OS CSPRNG.

    Every hex character carries four bits, so the default of 40 characters
    yields 160 bits of entropy.
    """

    def __init__(self, length: int = MIN_TOKEN_LENGTH) -> None:
        if length < MIN_TOKEN_LENGTH:
            msg = f"token length must be at least {MIN_TOKEN_LENGTH} characters"
            raise ValueError(msg)
        self.length = length

    def __call__(self) -> str:
        return secrets.token_hex((self.length + 1) // 2)[: self.length]


_default_generator = SecureTokenGenerator()


def generate_token() -> str:
    return _default_generator()
