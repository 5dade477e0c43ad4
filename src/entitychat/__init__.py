"""Chat with an AI assistant that reads and writes business records.

The package discovers a metadata graph from the SQLAlchemy business objects
(:mod:`entitychat.schema`) and exposes it to a conversational model through a
small set of generic entity tools (:mod:`entitychat.assistant`).
"""

__version__ = "0.1.0"
