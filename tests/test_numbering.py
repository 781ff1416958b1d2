import pytest

from invoicehub.app.core.errors import NotFoundError
from invoicehub.app.db.base import Base
from invoicehub.app.db.session import SessionLocal, engine
from invoicehub.app.models.user import User
from invoicehub.app.services.numbering import allocate_invoice_number, format_invoice_number


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_format_pads_to_four_digits():
    assert format_invoice_number("INV", 1) == "INV0001"
    assert format_invoice_number("INV", 7) == "INV0007"
    assert format_invoice_number("AB", 42) == "AB0042"


def test_format_keeps_wide_counters_whole():
    assert format_invoice_number("INV", 12345) == "INV12345"


def test_allocation_increments_per_user():
    with SessionLocal() as db:
        alice = User(email="alice@example.com", hashed_password="x", invoice_prefix="AL")
        bob = User(email="bob@example.com", hashed_password="x")
        db.add_all([alice, bob])
        db.commit()

        assert allocate_invoice_number(db, alice.id) == "AL0001"
        assert allocate_invoice_number(db, alice.id) == "AL0002"
        assert allocate_invoice_number(db, bob.id) == "INV0001"
        db.commit()

        db.refresh(alice)
        assert alice.next_invoice_num == 3


def test_rolled_back_allocation_is_not_consumed():
    with SessionLocal() as db:
        user = User(email="carol@example.com", hashed_password="x")
        db.add(user)
        db.commit()

        allocate_invoice_number(db, user.id)
        db.rollback()
        assert allocate_invoice_number(db, user.id) == "INV0001"


def test_unknown_user_raises_not_found():
    with SessionLocal() as db:
        with pytest.raises(NotFoundError):
            allocate_invoice_number(db, 404)
