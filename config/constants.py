"""Application constants."""

from decimal import Decimal

# Money is kept to the kobo (1/100 naira)
MONEY_PRECISION = Decimal("0.01")
KOBO_PER_NAIRA = 100

# Creator tiers: (tier, label, min_followers, max_followers, min_engagement, max_engagement, min_quality, commission %)
# Lower bounds inclusive, upper bounds exclusive, None = unbounded
CREATOR_TIERS = (
    (1, "Elite", 100_000, None, 3.0, None, 85.0, Decimal("3.0")),
    (2, "Professional", 50_000, 100_000, 2.0, 3.0, 70.0, Decimal("2.5")),
    (3, "Rising", 10_000, 50_000, 1.5, 2.0, 60.0, Decimal("2.0")),
    (4, "Micro", 5_000, 10_000, 1.0, None, 50.0, Decimal("1.5")),
)
NOT_QUALIFIED_LABEL = "Not qualified"

# Supported social platforms
SOCIAL_PLATFORMS = ("instagram", "tiktok", "twitter", "facebook")

# Notification kinds
NOTIFY_PAYMENT_CONFIRMED = "payment_confirmed"
NOTIFY_PROPERTY_PAYMENT_RECEIVED = "property_payment_received"
NOTIFY_CREATOR_SALE = "creator_sale_attributed"
NOTIFY_DOCUMENTS_SUBMITTED = "handover_documents_submitted"
NOTIFY_DOCUMENTS_VERIFIED = "handover_documents_verified"
NOTIFY_KEYS_RELEASED = "handover_keys_released"
NOTIFY_DOCUMENTS_SIGNED = "handover_documents_signed"
NOTIFY_KEYS_DELIVERED = "handover_keys_delivered"
NOTIFY_CONFIRM_RECEIPT = "developer_confirmed_handover"
NOTIFY_HANDOVER_COMPLETED = "handover_complete_payout"
NOTIFY_WITHDRAWAL_APPROVED = "withdrawal_approved"
NOTIFY_WITHDRAWAL_REJECTED = "withdrawal_rejected"
NOTIFY_CONTRACT_GENERATED = "contract_generated"
NOTIFY_CONTRACT_EXECUTED = "contract_executed"

# Contract of sale terms
CONTRACT_HANDOVER_DOCUMENTS = (
    "deed_of_assignment",
    "letter_of_allocation",
    "survey_plan",
    "building_approval",
    "receipts_or_title_docs",
)
CONTRACT_DISPUTE_CLAUSE = (
    "All disputes shall be resolved through arbitration in accordance with Nigerian law."
)
CONTRACT_TERMINATION_CLAUSE = (
    "Either party may terminate this contract with 30 days written notice, "
    "subject to completion of ongoing transactions."
)

# Wallet activity actions
ACTIVITY_PROPERTY_PURCHASE = "property_purchase"
ACTIVITY_ESCROW_RELEASE = "escrow_release"
ACTIVITY_CREATOR_COMMISSION = "creator_commission"
ACTIVITY_CREDIT = "credit"
ACTIVITY_WITHDRAWAL_REQUEST = "withdrawal_request"
ACTIVITY_WITHDRAWAL_COMPLETED = "withdrawal_completed"
ACTIVITY_WITHDRAWAL_REVERSED = "withdrawal_reversed"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
