"""Reusable payloads for backend test scenarios."""

LIGHT_THEME = {
    "slug": "light",
    "name": "Light",
    "category": "default",
    "primary_color": "#3B82F6",
    "css_variables": {
        "--color-primary": "#3B82F6",
        "--color-background": "#FFFFFF",
        "--color-text-body": "#111827",
    },
    "is_active": True,
    "sort_order": 0,
}

DARK_THEME = {
    "slug": "dark",
    "name": "Dark",
    "category": "default",
    "primary_color": "#60A5FA",
    "css_variables": {
        "--color-primary": "#60A5FA",
        "--color-background": "#0F172A",
    },
    "is_active": True,
    "sort_order": 1,
}

NOEL_THEME = {
    "slug": "noel_christmas",
    "name": "Noel",
    "category": "seasonal",
    "primary_color": "#C41E3A",
    "css_variables": {"--color-primary": "#C41E3A"},
    "is_active": True,
    "is_seasonal": True,
    "sort_order": 2,
}

HAPPY_PATH_THEME_FORM = {
    "name": "Ocean Breeze",
    "slug": "ocean_breeze",
    "description": "Blue and sand",
    "category": "custom",
    "primary_color": "#0EA5E9",
    "is_active": True,
    "is_seasonal": False,
    "sort_order": 3,
    "css_variables": {
        "--color-primary": "#0EA5E9",
        "--color-background": "#FFFBEB",
    },
}

HAPPY_PATH_ORDER_PAYLOAD = {
    "customer_name": "Lan Nguyen",
    "customer_phone": "0901234567",
    "customer_email": "lan@example.com",
    "customer_address": "12 Hang Bac, Hanoi",
    "customer_message": "Gift wrap please",
    "delivery_time": "morning",
    "items": [
        {"product_id": 1, "quantity": 2, "selected_color": "red", "selected_size": "M"},
        {"product_id": 2, "quantity": 1},
    ],
}

PRODUCTS = [
    {"id": 1, "name": "Silk Scarf", "price": 150000, "stock_quantity": 10, "active": True},
    {"id": 2, "name": "Lacquer Box", "price": 320000, "stock_quantity": 3, "active": True},
    {"id": 3, "name": "Retired Lamp", "price": 90000, "stock_quantity": 8, "active": False},
]
