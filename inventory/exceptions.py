class MenuError(Exception):
    """Base class for menu write and read failures shown to users"""
    default_message = 'The menu operation failed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MenuValidationError(MenuError):
    """Malformed or out-of-range input, rejected before touching storage"""
    default_message = 'Invalid input.'

    def __init__(self, message=None, messages=None):
        self.messages = list(messages or [message or self.default_message])
        super().__init__(message or '; '.join(self.messages))


class MenuIntegrityError(MenuError):
    """Missing parent entity, duplicate name, or an entity left without translations"""
    default_message = 'Item not found or insufficient permissions.'


class StorageUnavailable(MenuError):
    """The database could not be reached or a query failed"""
    default_message = 'Service temporarily unavailable. Please try again later.'
