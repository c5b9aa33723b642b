from .llm import LLMClientPort, DocumentExtractorPort
from .repos import ContactsRepoPort, DocumentsRepoPort, CredentialStorePort
from .similarity import SimilarityPort
from .source import IdentitySourcePort

__all__ = [
    "LLMClientPort",
    "DocumentExtractorPort",
    "ContactsRepoPort",
    "DocumentsRepoPort",
    "CredentialStorePort",
    "SimilarityPort",
    "IdentitySourcePort",
]
