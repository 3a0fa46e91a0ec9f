from .document import Database, Document, build_metadata, tokenize
from .schemes import SearchScheme
from .basic import BasicScheme
from .oxt import BooleanQueryScheme
from .substring import SubstringQueryScheme
from .loader import load_documents

__all__ = [
    "Database",
    "Document",
    "build_metadata",
    "tokenize",
    "SearchScheme",
    "BasicScheme",
    "BooleanQueryScheme",
    "SubstringQueryScheme",
    "load_documents",
]
