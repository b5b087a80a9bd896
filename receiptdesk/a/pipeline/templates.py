"""
Plain-text action templates the user can copy and send to an entity.
"""
from __future__ import annotations

from receiptdesk.a.schemas import Receipt

TEMPLATE_TYPES: tuple[str, ...] = ("optout", "inquiry", "delete")


def build_action_template(receipt: Receipt, template_type: str) -> str:
    if template_type == "optout":
        lines = [
            f"Hello {receipt.entity_name},",
            "",
            f"I would like to opt out of marketing messages for {receipt.service_name}.",
            "Channels: Email/SMS/App",
            f"Document: {receipt.doc_type.value}",
            "",
            "Thank you.",
        ]
    elif template_type == "inquiry":
        lines = [
            f"Hello {receipt.entity_name},",
            "",
            f"I am requesting details about data handling for {receipt.service_name}.",
            f"Retention: {receipt.retention}",
            f"Third-party sharing: {', '.join(receipt.third_party_services) or 'None'}",
            f"Revoke path: {receipt.revoke_path or 'Needs clarification'}",
            "",
            "Please reply with details.",
        ]
    elif template_type == "delete":
        lines = [
            f"Hello {receipt.entity_name},",
            "",
            f"Please delete or rectify my personal data for {receipt.service_name}.",
            f"Requested items: {', '.join(receipt.data_items)}",
            f"Document: {receipt.doc_type.value}",
            "",
            "Please confirm once completed.",
        ]
    else:
        raise ValueError(f"Unknown template type: {template_type}")
    return "\n".join(lines)
