from .task import Task, AuthUser, AuthSession

__all__ = ["Task", "AuthUser", "AuthSession"]
