"""Prompts and function schema for vendor product extraction."""

from typing import Any

EXTRACT_PRODUCTS_FUNCTION = "extract_products"

# Characters of scraped markdown sent to the model per vendor
MAX_CONTENT_CHARS = 6000

DEFAULT_MATCH_SCORE = 50

NO_VENDORS_ERROR = "No active vendors configured"
NO_PRODUCTS_MESSAGE = "No products found from vendors. Try adjusting your search query."

SYSTEM_PROMPTS = {
    "en": """You are an expert at extracting product information from online store search results.

Target item: {item_name}
Description: {description}
Category: {category}
Unit: {unit}

YOUR TASK:
1. Analyze the scraped content from {vendor}
2. Identify individual products that match the target item
3. Extract EXACTLY these details for each product:
   - Product name (as shown on the site)
   - Price in local currency (just the number, no currency symbols)
   - Product URL (full link to product page)
   - Product image URL (if available)
   - Stock availability (true/false)
   - Match score (0-100, where 100 = perfect match)

4. Return up to 5 products, ordered by match score

IMPORTANT:
- If you can't find clear products in the content, return an empty array
- Ensure prices are valid numbers
- URLs must start with http:// or https://""",
    "ro": """Ești un expert în extragerea de informații despre produse din rezultatele căutărilor pe site-uri de vânzări online.

Articol căutat: {item_name}
Descriere: {description}
Categorie: {category}
Unitate: {unit}

SARCINA TA:
1. Analizează conținutul scrapat de pe {vendor}
2. Identifică produsele individuale care se potrivesc articolului căutat
3. Extrage EXACT aceste detalii pentru fiecare produs:
   - Numele produsului (așa cum apare pe site)
   - Prețul în RON (doar numărul, fără "RON" sau alte simboluri)
   - URL-ul produsului (link complet către pagina produsului)
   - URL-ul imaginii produsului (dacă este disponibil)
   - Disponibilitatea în stoc (true/false)
   - Scorul de potrivire (0-100, unde 100 = potrivire perfectă)

4. Returnează maxim 5 produse, ordonate după scorul de potrivire

IMPORTANT:
- Dacă nu găsești produse clare în conținut, returnează un array gol
- Asigură-te că prețurile sunt numere valide
- URL-urile trebuie să înceapă cu http:// sau https://""",
}

USER_PROMPTS = {
    "en": "Analyze this scraped content from {vendor} and extract products:\n\n{content}",
    "ro": "Analizează următorul conținut scrapat de pe {vendor} și extrage produsele:\n\n{content}",
}

EXTRACT_PRODUCTS_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": EXTRACT_PRODUCTS_FUNCTION,
        "description": "Extract product information from scraped content",
        "parameters": {
            "type": "object",
            "properties": {
                "products": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "product_name": {"type": "string"},
                            "price": {"type": "number"},
                            "product_url": {"type": "string"},
                            "image_url": {
                                "type": "string",
                                "description": "Product image URL if available",
                            },
                            "in_stock": {"type": "boolean"},
                            "match_score": {
                                "type": "number",
                                "description": "Match quality from 0-100",
                            },
                        },
                        "required": ["product_name", "price", "match_score"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["products"],
            "additionalProperties": False,
        },
    },
}
