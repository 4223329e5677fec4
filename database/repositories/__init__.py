from .user_repo import UserRepository
from .creator_repo import CreatorRepository
from .property_repo import PropertyRepository
from .lead_repo import LeadRepository
from .escrow_repo import EscrowRepository
from .handover_repo import HandoverRepository
from .wallet_repo import WalletRepository
from .bank_account_repo import BankAccountRepository
from .withdrawal_repo import WithdrawalRepository
from .notification_repo import NotificationRepository
from .contract_repo import ContractRepository

__all__ = [
    "UserRepository",
    "CreatorRepository",
    "PropertyRepository",
    "LeadRepository",
    "EscrowRepository",
    "HandoverRepository",
    "WalletRepository",
    "BankAccountRepository",
    "WithdrawalRepository",
    "NotificationRepository",
    "ContractRepository",
]
