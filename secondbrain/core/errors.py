class RetrievalError(RuntimeError):
    """Document retrieval (search or query embedding) failed."""


class ConfigurationError(ValueError):
    """Search collaborators were wired with an unusable configuration."""
