"""
Domain errors shared by the supply and store trackers.

All of them are local and recoverable: views translate them into 4xx
responses, nothing here is fatal to the process.
"""


class TrackerError(Exception):
    """Base class for tracker domain errors"""

    default_message = 'Tracker error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(TrackerError):
    """Raised when an update targets a record id that is not in the repository"""

    default_message = 'Record not found'

    def __init__(self, record_type, record_id):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f'{record_type} with id {record_id} not found')


class ValidationError(TrackerError):
    """
    Bad input (empty required field, non-numeric quantity, unknown mode...).

    ``errors`` optionally maps field names to lists of messages, the same
    shape DRF serializers use.
    """

    default_message = 'Invalid input'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class ImportFormatError(ValidationError):
    """Malformed import document or one without a single valid record"""

    default_message = 'Invalid file format'


class OperationNotSupported(TrackerError):
    """The repository does not offer this operation (e.g. deleting a store)"""

    default_message = 'Operation not supported'
