from application.ports.secret_provider import SecretProvider

__all__ = ["SecretProvider"]
