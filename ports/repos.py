from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from models import ContactRecord, DocumentRecord


class ContactsRepoPort(Protocol):
    def create_contact(self, user_id: str, fields: Dict[str, Any]) -> ContactRecord:
        ...

    def get_contact(self, contact_id: str, user_id: str) -> Optional[ContactRecord]:
        ...

    def list_contacts(self, user_id: str) -> List[ContactRecord]:
        ...

    def update_contact(self, contact_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[ContactRecord]:
        ...


class DocumentsRepoPort(Protocol):
    def get_document(self, document_id: str, user_id: str) -> Optional[DocumentRecord]:
        ...

    def update_document(self, document_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[DocumentRecord]:
        ...


class CredentialStorePort(Protocol):
    def get_credential(self, user_id: str, service: str, key_name: str = "api_key") -> Optional[str]:
        ...
