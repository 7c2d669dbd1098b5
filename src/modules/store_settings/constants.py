"""Store settings constants.

``DEFAULT_SETTINGS`` is the catalogue written by ``initialize_defaults``;
its values are also the fallbacks used when a key is missing from the
database (e.g. a fresh install that never ran the seed command).
"""

from django.db import models


class SettingType(models.TextChoices):
    STRING = "string", "String"
    NUMBER = "number", "Number"
    BOOLEAN = "boolean", "Boolean"
    OBJECT = "object", "Object"
    ARRAY = "array", "Array"


class SettingCategory(models.TextChoices):
    GENERAL = "general", "General"
    COMPANY = "company", "Company"
    PAYMENT = "payment", "Payment"
    SHIPPING = "shipping", "Shipping"
    TAX = "tax", "Tax"
    EMAIL = "email", "Email"


# Categories never exposed through the public settings endpoint
PRIVATE_CATEGORIES: set[str] = {SettingCategory.EMAIL}

CACHE_KEY = "store_settings:all"

# Keys read by the checkout
TAX_RATE = "tax_rate"
FREE_SHIPPING_THRESHOLD = "free_shipping_threshold"
SHIPPING_COST = "shipping_cost"
ORDER_NOTIFICATION_EMAIL = "order_notification_email"
ADMIN_EMAIL = "admin_email"

# Checkout amounts that must never go below zero
NON_NEGATIVE_KEYS: set[str] = {TAX_RATE, FREE_SHIPPING_THRESHOLD, SHIPPING_COST}

# (key, value, type, category, description)
DEFAULT_SETTINGS: list[tuple[str, str, str, str, str]] = [
    # Company
    ("company_name", "Cracker Shop", SettingType.STRING, SettingCategory.COMPANY, "Company name"),
    ("company_email", "info@crackershop.com", SettingType.STRING, SettingCategory.COMPANY, "Company email address"),
    ("company_phone", "+91 9876543210", SettingType.STRING, SettingCategory.COMPANY, "Company phone number"),
    ("company_address", "123 Main Street, Sivakasi, Tamil Nadu, India", SettingType.STRING, SettingCategory.COMPANY, "Company address"),
    ("company_logo", "", SettingType.STRING, SettingCategory.COMPANY, "Company logo URL"),
    ("company_website", "https://crackershop.com", SettingType.STRING, SettingCategory.COMPANY, "Company website"),
    # General
    ("site_title", "Cracker Shop - Premium Fireworks", SettingType.STRING, SettingCategory.GENERAL, "Website title"),
    ("site_description", "Premium quality crackers and fireworks for all celebrations", SettingType.STRING, SettingCategory.GENERAL, "Website description"),
    ("currency", "INR", SettingType.STRING, SettingCategory.GENERAL, "Default currency"),
    ("currency_symbol", "₹", SettingType.STRING, SettingCategory.GENERAL, "Currency symbol"),
    ("timezone", "Asia/Kolkata", SettingType.STRING, SettingCategory.GENERAL, "Default timezone"),
    # Tax
    (TAX_RATE, "18", SettingType.NUMBER, SettingCategory.TAX, "Tax rate percentage"),
    ("tax_name", "GST", SettingType.STRING, SettingCategory.TAX, "Tax name"),
    ("gst_number", "", SettingType.STRING, SettingCategory.TAX, "GST registration number"),
    # Shipping
    (FREE_SHIPPING_THRESHOLD, "1000", SettingType.NUMBER, SettingCategory.SHIPPING, "Minimum order amount for free shipping"),
    (SHIPPING_COST, "50", SettingType.NUMBER, SettingCategory.SHIPPING, "Standard shipping cost"),
    ("max_shipping_weight", "25", SettingType.NUMBER, SettingCategory.SHIPPING, "Maximum shipping weight in kg"),
    # Email
    (ORDER_NOTIFICATION_EMAIL, "true", SettingType.BOOLEAN, SettingCategory.EMAIL, "Send email notifications for new orders"),
    (ADMIN_EMAIL, "admin@crackershop.com", SettingType.STRING, SettingCategory.EMAIL, "Admin email for notifications"),
    # Payment
    ("gpay_number", "", SettingType.STRING, SettingCategory.PAYMENT, "Google Pay number for payments"),
    ("upi_id", "", SettingType.STRING, SettingCategory.PAYMENT, "UPI ID for payments"),
    # POS
    ("pos_receipt_footer", "Thank you for shopping with us!", SettingType.STRING, SettingCategory.GENERAL, "Footer text printed on POS receipts"),
    ("invoice_terms", "All sales are final. No returns on fireworks.", SettingType.STRING, SettingCategory.GENERAL, "Terms printed on invoices"),
]
