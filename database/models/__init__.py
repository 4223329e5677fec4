from .user import User
from .social_account import SocialAccount, CreatorTierHistory
from .property import Property
from .lead import Lead
from .escrow import EscrowTransaction, EscrowStatus
from .handover import Handover, HandoverSignature
from .wallet import Wallet, WalletActivity
from .bank_account import BankAccount
from .withdrawal import Withdrawal, WithdrawalStatus
from .notification import Notification
from .contract import Contract, ContractStatus

__all__ = [
    "User",
    "SocialAccount",
    "CreatorTierHistory",
    "Property",
    "Lead",
    "EscrowTransaction",
    "EscrowStatus",
    "Handover",
    "HandoverSignature",
    "Wallet",
    "WalletActivity",
    "BankAccount",
    "Withdrawal",
    "WithdrawalStatus",
    "Notification",
    "Contract",
    "ContractStatus",
]
