"""Shared pytest fixtures for Reach payout core tests.

This module provides reusable fixtures for the database, repositories,
seeded users and properties, and services. Uses real SQLite databases.
"""

import os
import sys
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.security import DocumentSigner
from database.connection import Database
from database.models import Property, User
from database.repositories import (
    BankAccountRepository,
    ContractRepository,
    CreatorRepository,
    EscrowRepository,
    HandoverRepository,
    LeadRepository,
    NotificationRepository,
    PropertyRepository,
    UserRepository,
    WalletRepository,
    WithdrawalRepository,
)
from services import (
    ContractService,
    HandoverService,
    LeadService,
    NotificationService,
    PaymentEvent,
    PurchaseService,
    WalletService,
    WithdrawalService,
)


TEST_SIGNING_SECRET = "test-signing-secret"


@pytest_asyncio.fixture
async def temp_db():
    """Create a temporary SQLite database for testing.

    Yields a real Database instance with all tables initialized.
    Database is cleaned up after test completes.
    """
    # Create temp file for database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = Database(db_path)
    try:
        await db.initialize()
        yield db
    finally:
        await db.close()
        # Clean up temp file and WAL side files
        for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
            if os.path.exists(path):
                os.unlink(path)


# ==================== Repositories ====================

@pytest_asyncio.fixture
async def user_repo(temp_db: Database) -> UserRepository:
    return UserRepository(temp_db)


@pytest_asyncio.fixture
async def creator_repo(temp_db: Database) -> CreatorRepository:
    return CreatorRepository(temp_db)


@pytest_asyncio.fixture
async def property_repo(temp_db: Database) -> PropertyRepository:
    return PropertyRepository(temp_db)


@pytest_asyncio.fixture
async def lead_repo(temp_db: Database) -> LeadRepository:
    return LeadRepository(temp_db)


@pytest_asyncio.fixture
async def escrow_repo(temp_db: Database) -> EscrowRepository:
    return EscrowRepository(temp_db)


@pytest_asyncio.fixture
async def handover_repo(temp_db: Database) -> HandoverRepository:
    return HandoverRepository(temp_db)


@pytest_asyncio.fixture
async def wallet_repo(temp_db: Database) -> WalletRepository:
    return WalletRepository(temp_db)


@pytest_asyncio.fixture
async def bank_repo(temp_db: Database) -> BankAccountRepository:
    return BankAccountRepository(temp_db)


@pytest_asyncio.fixture
async def withdrawal_repo(temp_db: Database) -> WithdrawalRepository:
    return WithdrawalRepository(temp_db)


@pytest_asyncio.fixture
async def notification_repo(temp_db: Database) -> NotificationRepository:
    return NotificationRepository(temp_db)


@pytest_asyncio.fixture
async def contract_repo(temp_db: Database) -> ContractRepository:
    return ContractRepository(temp_db)


# ==================== Seeded users and listings ====================

@pytest_asyncio.fixture
async def developer(user_repo: UserRepository) -> User:
    return await user_repo.create("developer", "Lekki Homes Ltd", "dev@lekkihomes.ng", "2348031234567")


@pytest_asyncio.fixture
async def buyer(user_repo: UserRepository) -> User:
    return await user_repo.create("buyer", "Ada Obi", "ada@example.com", "2348059876543")


@pytest_asyncio.fixture
async def creator(user_repo: UserRepository) -> User:
    """A tier-2 (Professional, 2.5%) creator."""
    user = await user_repo.create("creator", "Tunde Reels", "tunde@example.com")
    await user_repo.update_tier(user.id, 2)
    return await user_repo.get_by_id(user.id)


@pytest_asyncio.fixture
async def admin(user_repo: UserRepository) -> User:
    return await user_repo.create("admin", "Reach Ops", "ops@reach.ng")


@pytest_asyncio.fixture
async def sale_property(property_repo: PropertyRepository, developer: User) -> Property:
    return await property_repo.create(
        developer.id, "3 Bedroom Terrace, Lekki", "sale", Decimal("1000000.00")
    )


@pytest_asyncio.fixture
async def rental_property(property_repo: PropertyRepository, developer: User) -> Property:
    return await property_repo.create(
        developer.id, "2 Bedroom Flat, Yaba", "rent", Decimal("250000.00")
    )


# ==================== Services ====================

@pytest.fixture
def signer() -> DocumentSigner:
    return DocumentSigner(TEST_SIGNING_SECRET)


@pytest_asyncio.fixture
async def notification_service(temp_db: Database) -> NotificationService:
    return NotificationService(temp_db)


@pytest_asyncio.fixture
async def wallet_service(temp_db: Database) -> WalletService:
    return WalletService(temp_db)


@pytest_asyncio.fixture
async def lead_service(temp_db: Database) -> LeadService:
    return LeadService(temp_db)


@pytest_asyncio.fixture
async def purchase_service(
    temp_db: Database,
    notification_service: NotificationService,
    wallet_service: WalletService,
) -> PurchaseService:
    return PurchaseService(
        temp_db,
        notification_service=notification_service,
        wallet_service=wallet_service,
        platform_fee_percent=5.0,
    )


@pytest_asyncio.fixture
async def handover_service(
    temp_db: Database,
    notification_service: NotificationService,
    wallet_service: WalletService,
    signer: DocumentSigner,
) -> HandoverService:
    return HandoverService(
        temp_db,
        notification_service=notification_service,
        wallet_service=wallet_service,
        signer=signer,
    )


@pytest_asyncio.fixture
async def withdrawal_service(
    temp_db: Database, notification_service: NotificationService
) -> WithdrawalService:
    return WithdrawalService(
        temp_db,
        notification_service=notification_service,
        min_amount=1000,
        max_per_transaction=5_000_000,
        max_daily=10_000_000,
        max_monthly=50_000_000,
    )


@pytest_asyncio.fixture
async def contract_service(
    temp_db: Database, notification_service: NotificationService, signer: DocumentSigner
) -> ContractService:
    return ContractService(
        temp_db,
        notification_service=notification_service,
        signer=signer,
        platform_fee_percent=5.0,
    )


@pytest.fixture
def make_payment():
    """Build a PaymentEvent for a property and buyer."""
    def _make(prop: Property, buyer: User, amount="1000000.00", reference=None) -> PaymentEvent:
        return PaymentEvent(
            transaction_id=reference or f"TX-{prop.id}-{buyer.id}",
            amount=Decimal(amount),
            property_id=prop.id,
            buyer_id=buyer.id,
            developer_id=prop.developer_id,
        )
    return _make
