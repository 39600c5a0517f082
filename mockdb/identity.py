"""
Actor identity source.

Authentication lives outside mockdb; stores only need to ask "who is the
current actor?" at the moment they read or write.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class IdentityProvider(Protocol):
    @property
    def current_user_id(self) -> Optional[str]:
        ...


class SessionIdentity:
    """Mutable identity holder driven by sign-in/sign-out events."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self._user_id = user_id

    @property
    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id must be a non-empty string")
        self._user_id = user_id

    def sign_out(self) -> None:
        self._user_id = None


__all__ = ["IdentityProvider", "SessionIdentity"]
