"""
Exceptions raised by the call chain analyzer
"""


class CallChainError(Exception):
    """Base exception for analyzer errors"""
    pass


class EntryNotFound(CallChainError):
    """The requested entry type or method does not exist"""

    def __init__(self, message: str, type_name: str = None, method_name: str = None):
        self.type_name = type_name
        self.method_name = method_name
        super().__init__(message)


class TypeNotFound(EntryNotFound):
    """No controller-like type matches the requested name"""

    def __init__(self, type_name: str):
        super().__init__(f"Controller '{type_name}' not found.", type_name=type_name)


class MethodNotFound(EntryNotFound):
    """The resolved type has no method with the requested name"""

    def __init__(self, type_name: str, method_name: str):
        super().__init__(
            f"Action method '{method_name}' not found in controller '{type_name}'.",
            type_name=type_name,
            method_name=method_name,
        )


class ProviderUnavailable(CallChainError):
    """The code model provider cannot serve a request"""
    pass


class ConfigError(CallChainError):
    """Configuration file is unreadable or invalid"""
    pass


class WalkCancelled(CallChainError):
    """Raised inside the walker when the cancellation signal fires"""
    pass
