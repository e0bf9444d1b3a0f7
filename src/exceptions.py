class ResourceNotFoundException(Exception):
    pass


class DocumentLockedException(Exception):
    pass


class PaymentExceedsBalanceException(ValueError):
    pass
