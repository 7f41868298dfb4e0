"""
Domain errors raised by the clinic services.

NotFound and InsufficientStock are input problems the operator must correct;
PersistenceFailure means the store failed and the unit of work was rolled back.
"""


class ClinicError(Exception):
    """Base class for service-level errors."""

    retryable = False

    def to_dict(self):
        return {'error': str(self)}


class NotFound(ClinicError):
    """A referenced inventory item or product does not exist."""

    def __init__(self, entity_kind, entity_id):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} with ID {entity_id} not found")

    def to_dict(self):
        return {
            'error': str(self),
            'entity': self.entity_kind,
            'id': self.entity_id,
        }


class InsufficientStock(ClinicError):
    """Requested quantity exceeds what is on hand."""

    def __init__(self, name, available, required):
        self.name = name
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock for {name}. Available: {available}, Required: {required}"
        )

    def __eq__(self, other):
        if not isinstance(other, InsufficientStock):
            return NotImplemented
        return (self.name, self.available, self.required) == \
            (other.name, other.available, other.required)

    __hash__ = Exception.__hash__

    def to_dict(self):
        return {
            'error': str(self),
            'item': self.name,
            'available': self.available,
            'required': self.required,
        }


class PersistenceFailure(ClinicError):
    """The database rejected or failed the operation; nothing was kept."""

    retryable = True
