"""
Pytest fixtures and configuration for Marketplace Backend tests

Provides principals and tokens, in-memory fakes of the repositories and
the payment gateway, and a TestClient wired to those fakes.
"""
import os

# Settings are read at import time
os.environ.setdefault("AUTH_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("FRONTEND_URL", "https://shop.example.com")

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from marketplace.core.auth import Principal, Role, create_access_token
from marketplace.core.rate_limit import rate_limiter
from marketplace.domain.product import Product, ProductCreate, ProductStatus
from marketplace.domain.revenue import PeriodRevenue, SellerRevenue
from marketplace.domain.user import User, UserCredentials
from marketplace.main import app
from marketplace.services.account_service import AccountService, get_account_service
from marketplace.services.payment_service import PaymentService, get_payment_service
from marketplace.services.product_service import ProductService, get_product_service
from marketplace.services.revenue_service import RevenueService, get_revenue_service


# =============================================================================
# In-memory fakes
# =============================================================================

class FakeProductRepository:
    """Dict-backed stand-in for ProductRepository with the same conditional semantics"""

    def __init__(self):
        self.products: Dict[int, Product] = {}
        self._next_id = 1

    def add(self, seller_id: int, status: ProductStatus = ProductStatus.ACTIVE, **fields) -> Product:
        product = Product(
            id=self._next_id,
            seller_id=seller_id,
            name=fields.get("name", f"Product {self._next_id}"),
            price=fields.get("price", Decimal("19.99")),
            stock=fields.get("stock", 5),
            status=status,
            deleted_at=datetime.now(timezone.utc) if status == ProductStatus.SOFT_DELETED else None,
            created_at=datetime.now(timezone.utc),
        )
        self.products[product.id] = product
        self._next_id += 1
        return product

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    def find_all(self, status=ProductStatus.ACTIVE, seller_id=None, search=None, limit=100, offset=0):
        rows = [p for p in self.products.values() if p.status == status]
        if seller_id is not None:
            rows = [p for p in rows if p.seller_id == seller_id]
        if search:
            rows = [p for p in rows if search.lower() in p.name.lower()]
        return rows[offset:offset + limit], len(rows)

    def create(self, seller_id: int, data: ProductCreate) -> Product:
        return self.add(seller_id, name=data.name, price=data.price, stock=data.stock)

    def _transition(self, product_id, from_status, to_status):
        product = self.products.get(product_id)
        if product is None or product.status != from_status:
            return None
        updated = product.model_copy(update={
            "status": to_status,
            "deleted_at": datetime.now(timezone.utc) if to_status == ProductStatus.SOFT_DELETED else None,
        })
        self.products[product_id] = updated
        return updated

    def move_to_trash(self, product_id: int) -> Optional[Product]:
        return self._transition(product_id, ProductStatus.ACTIVE, ProductStatus.SOFT_DELETED)

    def restore(self, product_id: int) -> Optional[Product]:
        return self._transition(product_id, ProductStatus.SOFT_DELETED, ProductStatus.ACTIVE)

    def hard_delete(self, product_id: int) -> bool:
        product = self.products.get(product_id)
        if product is None or product.status != ProductStatus.SOFT_DELETED:
            return False
        del self.products[product_id]
        return True


class FakeUserRepository:
    """Dict-backed stand-in for UserRepository"""

    def __init__(self):
        self.users: Dict[int, dict] = {}
        self._next_id = 1

    def add(self, email: str, password_hash: str, role: str = "buyer",
            name: Optional[str] = None, is_active: bool = True) -> dict:
        record = {
            "id": self._next_id,
            "email": email,
            "name": name,
            "role": role,
            "is_active": is_active,
            "password_hash": password_hash,
            "reset_password_token": None,
            "reset_password_expires": None,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        self.users[record["id"]] = record
        self._next_id += 1
        return record

    def _public(self, record: dict) -> dict:
        return {k: v for k, v in record.items()
                if k not in ("password_hash", "reset_password_token", "reset_password_expires")}

    def find_by_id(self, user_id: int) -> Optional[User]:
        record = self.users.get(user_id)
        return User(**self._public(record)) if record else None

    def find_credentials_by_email(self, email: str) -> Optional[UserCredentials]:
        for record in self.users.values():
            if record["email"].lower() == email.lower():
                return UserCredentials(password_hash=record["password_hash"], **self._public(record))
        return None

    def create(self, email, password_hash, name, role) -> User:
        from marketplace.core.errors import BadRequestError
        if self.find_credentials_by_email(email):
            raise BadRequestError("Email already registered")
        return User(**self._public(self.add(email.lower(), password_hash, role=role, name=name)))

    def set_reset_token(self, user_id, token_digest, expires_at) -> None:
        self.users[user_id]["reset_password_token"] = token_digest
        self.users[user_id]["reset_password_expires"] = expires_at

    def reset_password_with_token(self, token_digest, password_hash) -> Optional[int]:
        now = datetime.now(timezone.utc)
        for record in self.users.values():
            if (record["reset_password_token"] == token_digest
                    and record["reset_password_expires"] is not None
                    and record["reset_password_expires"] > now):
                record["password_hash"] = password_hash
                record["reset_password_token"] = None
                record["reset_password_expires"] = None
                return record["id"]
        return None


class FakeRevenueRepository:
    """Returns canned aggregates and records the windows it was asked for"""

    def __init__(self):
        self.seller_revenue: Dict[int, float] = {}
        self.total_revenue = 0.0
        self.periods: List[PeriodRevenue] = []
        self.per_seller: List[SellerRevenue] = []
        self.period_calls = []

    def get_seller_revenue(self, seller_id: int) -> float:
        return self.seller_revenue.get(seller_id, 0.0)

    def get_total_revenue(self) -> float:
        return self.total_revenue

    def get_revenue_by_period(self, start, end, granularity):
        self.period_calls.append((start, end, granularity))
        return list(self.periods)

    def get_revenue_per_seller(self):
        return list(self.per_seller)


class FakeStripeConnector:
    """Records calls instead of charging anything"""

    def __init__(self):
        self.calls = []
        self.error: Optional[Exception] = None

    async def create_payment_intent(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {
            "id": "pi_test_123",
            "object": "payment_intent",
            "amount": kwargs["amount"],
            "currency": kwargs["currency"],
            "status": "succeeded",
        }


# =============================================================================
# Principals and tokens
# =============================================================================

@pytest.fixture
def buyer() -> Principal:
    return Principal(id="1", email="buyer@example.com", name="Bea Buyer", role=Role.BUYER)


@pytest.fixture
def seller() -> Principal:
    return Principal(id="2", email="seller@example.com", name="Sam Seller", role=Role.SELLER)


@pytest.fixture
def other_seller() -> Principal:
    return Principal(id="3", email="other@example.com", name="Olga Other", role=Role.SELLER)


@pytest.fixture
def admin() -> Principal:
    return Principal(id="4", email="admin@example.com", name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def auth_header():
    """Build an Authorization header for a principal"""
    def _build(principal: Principal) -> dict:
        token = create_access_token(principal.id, principal.email, principal.role.value, principal.name)
        return {"Authorization": f"Bearer {token}"}
    return _build


# =============================================================================
# Wiring
# =============================================================================

@pytest.fixture
def product_repo() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def revenue_repo() -> FakeRevenueRepository:
    return FakeRevenueRepository()


@pytest.fixture
def stripe() -> FakeStripeConnector:
    return FakeStripeConnector()


@pytest.fixture
def sent_emails() -> list:
    return []


@pytest.fixture
def revenue_now() -> datetime:
    return datetime(2025, 5, 29, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def client(product_repo, user_repo, revenue_repo, stripe, sent_emails, revenue_now):
    """TestClient with every service backed by the in-memory fakes"""

    def send_reset_email(email, token):
        sent_emails.append((email, token))
        return True, None

    app.dependency_overrides[get_product_service] = lambda: ProductService(product_repo)
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(stripe)
    app.dependency_overrides[get_account_service] = lambda: AccountService(user_repo, send_reset_email)
    app.dependency_overrides[get_revenue_service] = lambda: RevenueService(revenue_repo, lambda: revenue_now)
    rate_limiter.reset()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    rate_limiter.reset()
