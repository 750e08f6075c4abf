"""Hand-driven coroutine schedulers, suspend strategies, result holders and a TCP demo."""

__version__ = "0.1.0"

__all__ = [
    "metaresult",
    "netdemo",
    "scheduler",
    "strategy",
    "task",
]