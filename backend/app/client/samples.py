"""Sample records for offline demos.

A session in sample mode loads these instead of calling the API.
"""

from typing import Any

SAMPLE_RECORDS: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "kind": "folder",
        "name": "Contratos 2026",
        "parent_id": None,
        "modified_at": "2026-02-10",
        "owner": "Roberto Silva",
    },
    {
        "id": "2",
        "kind": "file",
        "name": "Contrato_Fornecedor_XYZ.pdf",
        "parent_id": None,
        "size": "2.4 MB",
        "modified_at": "2026-02-11",
        "owner": "Maria Santos",
        "mime_type": "application/pdf",
    },
    {
        "id": "3",
        "kind": "file",
        "name": "NF_45678.pdf",
        "parent_id": None,
        "size": "856 KB",
        "modified_at": "2026-02-10",
        "owner": "João Costa",
        "mime_type": "application/pdf",
    },
    {
        "id": "4",
        "kind": "folder",
        "name": "Relatórios Mensais",
        "parent_id": None,
        "modified_at": "2026-02-09",
        "owner": "Ana Paula",
    },
    {
        "id": "5",
        "kind": "file",
        "name": "Proposta_Cliente_ABC.docx",
        "parent_id": None,
        "size": "1.2 MB",
        "modified_at": "2026-02-11",
        "owner": "Carlos Mendes",
        "mime_type": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    },
)


def sample_records() -> list[dict[str, Any]]:
    """Fresh copies of the sample records."""
    return [dict(r) for r in SAMPLE_RECORDS]
