# allotment/exceptions.py
"""
Errors raised by the allotment engine and its services.

Every error carries the HTTP status the API answers with; views turn them into
``{"error": str(exc)}`` responses. None of them leaves a partially written run.
"""


class AllotmentError(Exception):
    status_code = 400
    default_message = "Allotment failed."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class AllotmentConfigError(AllotmentError):
    """Roster data is malformed (negative capacity, broken ranks, bad slots)."""
    status_code = 400
    default_message = "Invalid course or preference data."

    def __init__(self, message=None, problems=None):
        self.problems = list(problems or [])
        if message is None and self.problems:
            message = "Invalid course or preference data: " + "; ".join(self.problems)
        super().__init__(message)


class AllotmentInProgress(AllotmentError):
    status_code = 409
    default_message = "An allotment run is already in progress. Please retry later."


class NoAllotmentRun(AllotmentError):
    status_code = 409
    default_message = "No allotment run exists yet. Run the allotment first."


class AllotmentStorageError(AllotmentError):
    status_code = 503
    default_message = "Could not save the allotment run; the previous results are unchanged."


class AllotmentCancelled(AllotmentError):
    status_code = 409
    default_message = "The allotment run was cancelled before it was saved."
