"""Error kinds raised by the link services.

Every failure carries a stable ``kind`` string so callers (the HTTP layer,
scripts, tests) can branch on it instead of parsing messages.
"""


class LinkError(Exception):
    kind = "link_error"
    retryable = False
    default_message = "Download link error"

    def __init__(self, message: str | None = None, link_id: str | None = None):
        self.message = message or self.default_message
        self.link_id = link_id
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class InvalidInput(LinkError):
    kind = "invalid_input"
    default_message = "Invalid link request"


class LinkNotFound(LinkError):
    kind = "not_found"
    default_message = "Download link not found"


class LinkExpired(LinkError):
    kind = "expired"
    default_message = "Download link has expired"


class LinkExhausted(LinkError):
    kind = "exhausted"
    default_message = "Download limit reached"


class SignerError(LinkError):
    kind = "signer_error"
    retryable = True
    default_message = "Failed to generate download URL"


class DuplicateId(LinkError):
    kind = "duplicate_id"
    default_message = "Link identifier already exists"
