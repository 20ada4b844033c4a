"""Base exception for external provider failures."""


class ProviderError(Exception):
    """An embedding, chat or weather provider call failed.

    Callers recover from these locally: search degrades to lexical scoring,
    weather falls back to mock data, and a failed chat completion becomes a
    fixed apology reply.
    """

    pass
