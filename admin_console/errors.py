# admin_console/errors.py


class AdminError(Exception):
    """Base class for failures surfaced to the operator."""


class AuthenticationError(AdminError):
    pass


class ValidationError(AdminError):
    pass


class ImageUploadError(AdminError):
    pass


class BusyError(AdminError):
    pass
