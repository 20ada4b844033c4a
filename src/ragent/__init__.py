"""
ragent - retrieval-augmented conversational agent.
"""

from ragent.http_server import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
