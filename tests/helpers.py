import unittest
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from juliecraft.core.security import create_access_token, get_password_hash
from juliecraft.database import Base, get_db
from juliecraft.main import app
from juliecraft.models.auth import Profile
from juliecraft.models.inventory import Product
from juliecraft.models.orders import Order


class ApiTestCase(unittest.TestCase):
    """Runs the real app against a fresh in-memory SQLite database per test."""

    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    # ---------- Seeding ----------

    def save(self, obj):
        """Persists obj in its own session; attributes stay readable afterwards."""
        with self.SessionLocal(expire_on_commit=False) as db:
            db.add(obj)
            db.commit()
            db.refresh(obj)
        return obj

    def make_profile(self, email="shopper@example.com", password="secret123",
                     is_admin=False, role="customer", status="active", **extra):
        profile = Profile(
            email=email,
            password_hash=get_password_hash(password),
            is_admin=is_admin,
            role=role,
            status=status,
            **extra,
        )
        return self.save(profile)

    def make_admin(self, email="admin@example.com", role="admin"):
        return self.make_profile(email=email, is_admin=True, role=role)

    def make_product(self, sku, stock=20, price="10.00", **extra):
        product = Product(name=f"Product {sku}", sku=sku, price=Decimal(price), stock=stock, **extra)
        return self.save(product)

    def make_order(self, order_number, status="pending", total="0.00", **extra):
        order = Order(
            order_number=order_number,
            customer_email="buyer@example.com",
            customer_name="Buyer",
            status=status,
            total=Decimal(total),
            **extra,
        )
        return self.save(order)

    def auth_headers(self, profile):
        token = create_access_token(profile.id, email=profile.email, role=profile.role)
        return {"Authorization": f"Bearer {token}"}

    def fetch(self, model, pk):
        """Reads a row back in a fresh session."""
        with self.SessionLocal(expire_on_commit=False) as db:
            return db.get(model, pk)
