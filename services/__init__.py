from .notification_service import NotificationService
from .wallet_service import WalletService, WalletBalance
from .lead_service import LeadService
from .tier_service import TierService
from .purchase_service import PurchaseService, PaymentEvent, PurchaseResult
from .handover_service import HandoverService
from .withdrawal_service import WithdrawalService
from .contract_service import ContractService

__all__ = [
    "NotificationService",
    "WalletService",
    "WalletBalance",
    "LeadService",
    "TierService",
    "PurchaseService",
    "PaymentEvent",
    "PurchaseResult",
    "HandoverService",
    "WithdrawalService",
    "ContractService",
]
