"""RenasPress - bilingual news publishing API."""

__version__ = "0.1.0"
