from .voucher import Voucher
from .user_voucher import UserVoucher

__all__ = ['Voucher', 'UserVoucher']
