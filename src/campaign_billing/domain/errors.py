"""Domain-specific exception classes for campaign billing."""


class BillingError(Exception):
    """Base class for all domain errors in campaign billing."""


class ModelNotFoundError(BillingError):
    """Raised when a pricing model identifier is not registered.

    Attributes:
        model_id: The identifier that was looked up.
    """

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id
        super().__init__(f"Pricing model '{model_id}' not found")


class UnknownInputError(BillingError):
    """Raised when a caller names an input the selected model does not declare.

    Attributes:
        model_id: The model the input was addressed to.
        input_name: The undeclared input name.
    """

    def __init__(self, model_id: str, input_name: str) -> None:
        self.model_id = model_id
        self.input_name = input_name
        super().__init__(f"Pricing model '{model_id}' has no input '{input_name}'")
