"""
Exception types for the family views pipeline.

Two families of failure:
- PreconditionError: detected before anything is committed; the run reports
  failure and leaves the document as it was.
- HostOperationError: a host create/rename/delete call failed inside a
  transaction; the transaction rolls back and the error propagates.
"""


class FamilyViewsError(Exception):
    """Base class for every error raised by this package."""


class PreconditionError(FamilyViewsError):
    """A required condition for the run does not hold."""


class WrongDocumentKindError(PreconditionError):
    """Target document is a family document, not a project."""


class FamilyLoadError(PreconditionError):
    """The family definition could not be loaded into the document."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = "Cannot load family: {0}".format(path)
        if reason:
            msg = "{0} ({1})".format(msg, reason)
        super(FamilyLoadError, self).__init__(msg)


class MissingReferenceViewError(PreconditionError):
    """Document has no non-template 3D view to take the view family type from."""


class MissingViewTemplateError(PreconditionError):
    """Document has no 3D view template to apply to generated views."""


class HostOperationError(FamilyViewsError):
    """A host document operation failed (name collision, bad id, no transaction...)."""
