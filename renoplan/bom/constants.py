"""Prompts and function schema for BOM generation."""

from typing import Any

CREATE_BOM_FUNCTION = "create_bom"

BOM_CATEGORIES = (
    "Flooring",
    "Cabinetry",
    "Appliances",
    "Lighting",
    "Plumbing",
    "Paint & Finishes",
    "Hardware",
    "Other",
)

BOM_SYSTEM_PROMPT = (
    "You are a renovation expert. "
    "Generate detailed, accurate bills of materials for home renovation projects."
)

BOM_ITEM_INSTRUCTIONS = """For each item provide:
- item_name: Specific product name
- description: Detailed specs
- quantity: Numeric value
- unit: sq ft, sq m, linear ft, pieces, gallons, etc.
- estimated_unit_price: Estimated cost per unit in USD
- priority: high, medium, or low
- notes: Installation notes or alternatives"""

CREATE_BOM_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": CREATE_BOM_FUNCTION,
        "description": "Create a bill of materials with categorized items",
        "parameters": {
            "type": "object",
            "properties": {
                "items": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "category": {"type": "string"},
                            "item_name": {"type": "string"},
                            "description": {"type": "string"},
                            "quantity": {"type": "number"},
                            "unit": {"type": "string"},
                            "estimated_unit_price": {"type": "number"},
                            "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                            "notes": {"type": "string"},
                        },
                        "required": ["category", "item_name", "quantity", "unit"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["items"],
            "additionalProperties": False,
        },
    },
}
