"""Render merged search results as chat-completion context."""

from typing import List, Optional

from app.schemas.search import SearchResult

SYSTEM_PROMPT = (
    "You are an expert AI assistant for a manufacturing and quality management system. "
    "You have access to comprehensive product data, manufacturing documents, quality "
    "procedures, specifications, and form templates. Use the provided context to answer "
    "questions about products, their specifications, safety requirements, manufacturing "
    "processes, quality procedures, compliance documentation, and any other company "
    "information. Be specific and detailed in your responses, referencing specific "
    "products, documents, or procedures when relevant."
)

BLOCK_SEPARATOR = "\n\n---\n\n"


def _name_of(person: Optional[dict]) -> Optional[str]:
    return (person or {}).get("name")


def _format_product(data: dict) -> str:
    lines = [
        f"PRODUCT: {data.get('product_name')}",
        f"SKU: {data.get('sku')}",
        f"Brand: {data.get('brand')}",
    ]
    for label, key in (
        ("Health Category", "health_category"),
        ("Therapeutic Platform", "therapeutic_platform"),
        ("Nutrient Type", "nutrient_type"),
        ("Format", "format"),
        ("Number of Actives", "number_of_actives"),
        ("Bottle Count", "bottle_count"),
    ):
        lines.append(f"{label}: {data.get(key) or 'N/A'}")
    lines.append(f"Unit Count: {data.get('unit_count') or 0}")
    lines.append(f"Manufacturer: {data.get('manufacturer') or 'N/A'}")
    lines.append(f"Contains Iron: {'Yes' if data.get('contains_iron') else 'No'}")
    return "\n".join(lines)


def _format_template(result: SearchResult) -> str:
    data = result.data
    return (
        f"TEMPLATE: {data.get('name')}\n"
        f"Type: {data.get('type')}\n"
        f"Description: {data.get('description') or 'No description'}\n"
        f"Created by: {_name_of(data.get('creator')) or 'Unknown'}\n"
        f"Template Content: {result.relevant_chunk or 'Template structure available'}"
    )


def _format_document(result: SearchResult) -> str:
    data = result.data
    lines = [
        f"DOCUMENT: {data.get('title')}",
        f"Filename: {data.get('filename')}",
        f"Category: {data.get('category')}",
        f"Status: {data.get('status') or 'Unknown'}",
        f"Workflow Status: {data.get('workflow_status') or 'Unknown'}",
        f"Created by: {_name_of(data.get('user')) or 'Unknown'}",
    ]
    product = data.get("product")
    if product:
        lines.append(f"Associated Product: {product.get('product_name')} ({product.get('sku')})")
    template = data.get("template")
    if template:
        lines.append(f"Based on Template: {template.get('name')} ({template.get('type')})")
    lines.append(f"Content: {result.relevant_chunk or 'Content not available'}")
    return "\n".join(lines)


def format_context(results: List[SearchResult]) -> str:
    """One labelled block per result, separated by horizontal rules."""
    blocks = []
    for result in results:
        if result.type == "product":
            blocks.append(_format_product(result.data))
        elif result.type == "template":
            blocks.append(_format_template(result))
        else:
            blocks.append(_format_document(result))
    return BLOCK_SEPARATOR.join(blocks)


def build_chat_messages(query: str, context: str) -> List[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Context:\n{context}\n\nQuestion: {query}"},
    ]
