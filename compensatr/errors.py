"""Errors that abort a run before the search starts."""


class CompensatrError(Exception):
    """Base class for fatal pipeline errors."""


class InputError(CompensatrError):
    """The projects file could not be read or is not valid JSON."""


class EmptyInputError(CompensatrError):
    """The input contains no projects."""


class InvalidProjectError(CompensatrError):
    """A project record violates the input schema."""


class InvalidTimeUnitError(CompensatrError):
    """One or more projects use a time unit outside the conversion table."""

    def __init__(self, project_ids: list):
        self.project_ids = list(project_ids)
        super().__init__(
            f'Time units are not recognised for projects with id: {self.project_ids}'
        )
