"""Exception types raised by ontomap."""


class OntomapError(Exception):
    """Base class for ontomap failures."""


class ConfigurationError(OntomapError):
    """Missing or invalid settings, e.g. no API key. Raised before any request is made."""


class AIServiceError(OntomapError):
    """The AI collaborator failed: transport error, HTTP error or unparsable reply."""


class TabNotFoundError(OntomapError, KeyError):
    def __init__(self, tab_id: str) -> None:
        super().__init__(f"Tab not found: {tab_id}")
        self.tab_id = tab_id

    def __str__(self) -> str:
        return self.args[0]
