"""Composition of the security services."""

from revcycle.infrastructure.di.container import (
    SecurityContainer,
    build_in_memory_security_container,
    build_security_container,
    build_sqlalchemy_security_container,
)

__all__ = [
    "SecurityContainer",
    "build_in_memory_security_container",
    "build_security_container",
    "build_sqlalchemy_security_container",
]
