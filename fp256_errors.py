"""Error kinds raised while building or using prime-field parameters."""


class FieldError(Exception):
    pass


class InvalidModulus(FieldError, ValueError):
    pass


class ConstantMismatch(FieldError):
    def __init__(self, name: str, declared, derived):
        self.name = name
        self.declared = declared
        self.derived = derived
        super().__init__(f'{name}: declared {declared!r} but derived {derived!r}')


class InvalidTwoAdicity(FieldError, ValueError):
    pass


class NotInvertible(FieldError, ZeroDivisionError):
    pass


class InvalidParameterTable(FieldError, ValueError):
    pass
