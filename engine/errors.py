class InvalidInputError(ValueError):
    """Caller supplied a filing status or income the evaluator cannot use."""


class InvalidFilingStatus(InvalidInputError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid filing status {value!r}: expected 1-5 or a known status name")


class InvalidIncome(InvalidInputError):
    def __init__(self, value, reason="must be a finite, non-negative number"):
        self.value = value
        super().__init__(f"Invalid gross income {value!r}: {reason}")
