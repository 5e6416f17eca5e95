"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(EmailAddress value object, positive prices, non-negative stock) and match
the field names of the API's Pydantic request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

# ---------- Identity ----------


def valid_email() -> str:
    """Generate emails that pass EmailAddress validation.

    Rules: exactly one @, no whitespace, a dotted domain, no leading,
    trailing or consecutive dots.
    """
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def username() -> str:
    return f"{fake.user_name()[:30]}_{uuid.uuid4().hex[:6]}"


def valid_phone() -> str:
    area = random.randint(200, 999)
    prefix = random.randint(200, 999)
    line = random.randint(1000, 9999)
    return f"+1-{area}-{prefix}-{line}"


def registration_data() -> dict:
    """RegisterRequest payload."""
    return {
        "username": username(),
        "email": valid_email(),
        "password": fake.password(length=12),
        "phone": valid_phone(),
    }


# ---------- Catalogue ----------

CATEGORIES = ["kitchen", "lighting", "furniture", "garden", "electronics"]
SERVICE_CATEGORIES = ["assembly", "repair", "cleaning", "tutoring"]


def product_data(stock: int | None = None) -> dict:
    """CreateProductRequest payload."""
    return {
        "name": f"{fake.word().title()} {fake.word().title()}"[:255],
        "description": fake.sentence(nb_words=12),
        "price": round(random.uniform(5, 500), 2),
        "stock": stock if stock is not None else random.randint(50, 500),
        "category": random.choice(CATEGORIES),
    }


def service_data() -> dict:
    """CreateServiceRequest payload."""
    return {
        "name": f"{fake.job()[:200]} session",
        "description": fake.sentence(nb_words=10),
        "price": round(random.uniform(20, 200), 2),
        "category": random.choice(SERVICE_CATEGORIES),
    }


# ---------- Cart ----------


def product_line(product_id: str, max_quantity: int = 3) -> dict:
    """CartLineRequest payload for a product."""
    return {"product_id": product_id, "quantity": random.randint(1, max_quantity)}


def service_line(service_id: str) -> dict:
    """CartLineRequest payload for a service with an appointment in the next fortnight."""
    appointment = datetime.now(UTC) + timedelta(days=random.randint(1, 14), hours=random.randint(8, 17))
    return {"service_id": service_id, "quantity": 1, "appointment": appointment.isoformat()}
