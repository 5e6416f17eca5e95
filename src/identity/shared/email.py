"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@identity.value_object
class EmailAddress:
    """A structurally valid email address, normalised to lower case by ``normalised``."""

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        invalid = ValidationError({"email": [f"Invalid email address: {email}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid

        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid

        for label in domain_part.split("."):
            if not label or label.startswith("-") or label.endswith("-"):
                raise invalid

        if ".." in local_part or any(ch in email for ch in _FORBIDDEN):
            raise invalid

    @property
    def normalised(self) -> str:
        return self.address.strip().lower()
